"""
Default content for diagnosis results.

DEFAULT_* values fill individual fields the model did not return.
FALLBACK_* values make up the whole result when nothing was recoverable;
they steer the user toward a human counselor.

All text here is user-facing: keep it free of technical wording.
"""

from datetime import datetime
from typing import Dict, Optional

from career_diagnosis.models.diagnosis import (
    ActionPlan,
    DiagnosisResult,
    EmotionalConnection,
    FutureScenario,
    FutureScenarios,
    MonthlyGoal,
    PersonalInsights,
    PersonalizedService,
    QuarterVision,
    QuickDiagnosisResult,
    WeeklyAction,
)
from career_diagnosis.models.parsing import ConfidenceTier
from career_diagnosis.models.request import DiagnosisContext
from career_diagnosis.utils.time import jst_timestamp

DEFAULT_RESULT_TYPE = "現職改善型"
DEFAULT_URGENCY = "medium"

# =============================================================================
# FIELD DEFAULTS (success path)
# =============================================================================

DEFAULT_SUMMARIES: Dict[ConfidenceTier, str] = {
    "high": "あなたの回答を詳細に分析した結果、具体的で実行可能なアドバイスをご提供いたします。",
    "medium": "あなたの状況を分析し、現在の情報に基づいて最適なガイダンスをお伝えします。",
    "low": "今回は部分的な分析となりましたが、あなたの状況に応じた基本的なアドバイスをご提供いたします。",
}

DEFAULT_EMOTIONAL_CONNECTION = EmotionalConnection(
    recognition="あなたの状況を深く理解し、共感いたします",
    validation="あなたの感情や悩みは、とても自然で正当なものです",
    hope_message="一緒に最適な解決策を見つけていきましょう",
)

DEFAULT_INSIGHTS = PersonalInsights(
    your_situation_analysis="あなたは現在のお仕事に何らかの課題や不満を感じており、より良い働き方を模索している段階にあります",
    emotional_pattern="あなたは真面目で責任感が強く、現状に対して建設的な解決策を求める傾向があります",
    stress_response="ストレスを感じた際は一人で抱え込みがちですが、適切な相談により大幅に改善できる可能性があります",
    motivation_drivers=["働きがいのある環境", "適正な評価と報酬", "ワークライフバランス"],
    career_strengths=["問題解決への積極性", "継続的な学習姿勢", "職務への責任感"],
    growth_areas=["自己主張スキル", "ストレス管理", "キャリア戦略立案"],
)

DEFAULT_ACTION_PLAN = ActionPlan(
    this_week=[
        WeeklyAction(
            action="キャリアの現状整理と優先順位づけ",
            why_for_you="今の悩みを明確化し、解決すべきポイントを特定するため",
            how_to_start="紙に「今の不満」「理想の働き方」「必要なスキル」を書き出してみる（20分）",
            expected_feeling="漠然とした不安がクリアなアクションアイテムに変わるすっきり感",
        )
    ],
    this_month=[
        MonthlyGoal(
            goal="具体的なキャリア戦略の策定",
            your_approach="情報収集と相談を組み合わせ、無理のないペースで進める",
            success_indicators=["具体的なロードマップの作成", "不安の軽減と方向性の明確化", "小さな行動変化の開始"],
            potential_challenges="情報が多すぎて決められない状態",
            support_needed=["信頼できる相談相手", "キャリア情報の収集時間"],
        )
    ],
    next_3_months=[
        QuarterVision(
            vision="明確な方向性と実行可能なアクションプランの確立",
            milestone_path=["キャリアゴールの確定", "必要スキルの特定と取得開始", "具体的行動の実行開始"],
            decision_points=["現職継続 vs 転職の最終判断", "スキルアップ方法の選択", "タイムラインの調整"],
            backup_plans=["複数の選択肢の保持", "段階的アプローチの準備", "リスク管理と緊急時プラン"],
        )
    ],
)

DEFAULT_SERVICES = [
    PersonalizedService(
        service_category="career_counseling",
        why_recommended_for_you="あなたの具体的な状況に合わせた個別アドバイスで、迷いを解消できます",
        timing_for_you="現在のお気持ちが整理されている今がベストタイミングです",
        expected_benefit_for_you="3-6ヶ月で明確なキャリア戦略と実行計画を策定できます",
        how_to_choose="初回無料相談があり、あなたの業界経験が豊富なカウンセラーを選んでください",
    ),
    PersonalizedService(
        service_category="skills_assessment",
        why_recommended_for_you="あなたの強みを客観的に把握することで、自信を持って次のステップに進めます",
        timing_for_you="キャリア検討の初期段階である今こそ重要です",
        expected_benefit_for_you="市場価値の明確化と具体的なスキルアップ方針が得られます",
        how_to_choose="オンラインで手軽に受けられる診断ツールから始めることをお勧めします",
    ),
    PersonalizedService(
        service_category="stress_management",
        why_recommended_for_you="現在感じているストレスを軽減し、冷静な判断力を回復できます",
        timing_for_you="ストレスが蓄積する前の予防的対策として今すぐ始めましょう",
        expected_benefit_for_you="1-2週間で気持ちの軽さと集中力の向上を実感できます",
        how_to_choose="アプリやオンライン講座など、日常に取り入れやすい方法を選んでください",
    ),
]

DEFAULT_SCENARIOS = FutureScenarios(
    stay_current_path=FutureScenario(
        probability_for_you="継続的な分析により判定",
        what_happens_to_you=["現状維持による安定", "徐々な改善の可能性"],
        your_risks=["変化の機会逸失", "慣性による停滞"],
        your_success_keys=["積極的な改善行動", "継続的な自己投資"],
    ),
    change_path=FutureScenario(
        probability_for_you="準備と計画により実現可能",
        what_happens_to_you=["新たな環境での成長", "理想に近づく体験"],
        your_risks=["環境変化への適応", "初期の不安定性"],
        your_success_keys=["十分な準備", "適切なタイミング", "継続的な努力"],
    ),
)

# =============================================================================
# FALLBACK DIAGNOSIS (nothing recoverable)
# =============================================================================

FALLBACK_EMOTIONAL_CONNECTION = EmotionalConnection(
    recognition="今回は十分な分析ができませんでしたが、あなたの状況とお気持ちの重要性を理解しています",
    validation="どのような状況でも、あなたの感情や悩みは正当で価値あるものです",
    hope_message="専門家との相談を通じて、きっと良い方向性が見つかります",
)

FALLBACK_SUMMARY = (
    "今回はあなたの回答を十分に分析することができませんでしたが、"
    "あなたのキャリアに関する悩みは十分解決可能です。"
    "まずはキャリアカウンセラーなどの専門家に相談し、"
    "現在のお気持ちや状況を一緒に整理してもらうことをお勧めします。"
    "信頼できる相談相手と話すことで、あなたに合った具体的な次の一歩がきっと見えてきます。"
)

FALLBACK_INSIGHTS = PersonalInsights(
    your_situation_analysis="あなたの状況をより詳しく理解するため、専門家との個別相談が効果的です",
    emotional_pattern="あなたの感情パターンについて、さらなる対話を通じて理解を深めていきましょう",
    stress_response="あなたに最適なストレス対処法を、専門家と一緒に見つけていきましょう",
    motivation_drivers=["詳細な対話による分析が必要"],
    career_strengths=["個別相談での発見が期待できます"],
    growth_areas=["専門家との協働で明確化"],
)

FALLBACK_ACTION_PLAN = ActionPlan(
    this_week=[
        WeeklyAction(
            action="信頼できるキャリアカウンセラーなどの専門家を探して相談を申し込む",
            why_for_you="より詳細で個人に最適化された分析とアドバイスを得るため",
            how_to_start="キャリアカウンセラーや心理カウンセラーの相談窓口を検索してみる",
            expected_feeling="具体的な解決策への道筋が見えてくる安心感",
        )
    ],
    this_month=[
        MonthlyGoal(
            goal="専門的なキャリア相談を受ける",
            your_approach="あなたに合った相談方法（対面・オンライン等）を選択",
            success_indicators=["具体的な行動計画の策定", "気持ちの整理"],
            potential_challenges="相談先の選択、時間と費用の確保",
            support_needed=["適切な相談先の情報", "相談に向けた準備"],
        )
    ],
    next_3_months=[
        QuarterVision(
            vision="明確なキャリア戦略と実行計画の確立",
            milestone_path=["専門相談実施", "詳細分析完了", "具体的行動開始"],
            decision_points=["相談結果の評価", "行動計画の決定"],
            backup_plans=["複数の専門家意見の比較", "段階的なアプローチの採用"],
        )
    ],
)

FALLBACK_SERVICES = [
    PersonalizedService(
        service_category="career_counseling",
        why_recommended_for_you="あなたの状況に特化した深い分析とパーソナライズされたアドバイスを提供",
        timing_for_you="現在が相談に最適なタイミングです",
        expected_benefit_for_you="具体的で実行可能な個別キャリア戦略の策定",
        how_to_choose="あなたの価値観と相性の良い、経験豊富な専門家を選択",
    )
]

FALLBACK_SCENARIOS = FutureScenarios(
    stay_current_path=FutureScenario(
        probability_for_you="詳細な専門分析により判定",
        what_happens_to_you=["専門相談による状況の明確化"],
        your_risks=["不明確な状況の継続"],
        your_success_keys=["適切な専門家の選択", "率直な相談"],
    ),
    change_path=FutureScenario(
        probability_for_you="個別相談による詳細検討が必要",
        what_happens_to_you=["専門的サポートによる方向性の確立"],
        your_risks=["準備不足による判断ミス"],
        your_success_keys=["十分な準備と専門的助言", "段階的なアプローチ"],
    ),
)


def build_fallback_diagnosis(
    context: DiagnosisContext,
    now: Optional[datetime] = None,
) -> DiagnosisResult:
    """Complete low-confidence diagnosis that recommends talking to a professional."""
    return DiagnosisResult(
        result_type=DEFAULT_RESULT_TYPE,
        confidence_level="low",
        urgency_level=DEFAULT_URGENCY,
        emotional_connection=context.empathy or FALLBACK_EMOTIONAL_CONNECTION,
        personal_summary=FALLBACK_SUMMARY,
        personal_insights=FALLBACK_INSIGHTS,
        personalized_action_plan=FALLBACK_ACTION_PLAN,
        personalized_services=FALLBACK_SERVICES,
        your_future_scenarios=FALLBACK_SCENARIOS,
        diagnosed_at=jst_timestamp(now),
        answered_questions=context.answered_questions,
    )


# =============================================================================
# QUICK DIAGNOSIS (phase 1)
# =============================================================================

DEFAULT_QUICK_SUMMARY = "基本的な診断結果をお伝えします"
DEFAULT_QUICK_ACTIONS = ["現状の整理", "目標の明確化", "次の行動計画"]
DEFAULT_DETAIL_TIME = 15


def build_quick_fallback() -> QuickDiagnosisResult:
    return QuickDiagnosisResult(
        result_type=DEFAULT_RESULT_TYPE,
        confidence_level="low",
        urgency_level=DEFAULT_URGENCY,
        summary="今回は基本的な方向性をお伝えします。より詳しい分析もぜひお試しください。",
        immediate_actions=["現在の状況を整理してみる", "信頼できる人に相談する", "小さな改善から始める"],
        estimated_detail_time=DEFAULT_DETAIL_TIME,
    )
