"""
Phase-specific prompts and answer formatting for the staged diagnosis.
"""

from typing import Optional, Tuple

from career_diagnosis.models.diagnosis import EmotionalConnection
from career_diagnosis.models.request import StagedDiagnosisRequest


# =============================================================================
# QUESTIONNAIRE
# =============================================================================

QUESTIONS: Tuple[str, ...] = (
    "今の仕事について、率直にどう感じていますか？",
    "仕事で最もストレスを感じるのはどのような時ですか？",
    "朝起きた時、仕事に対するモチベーションやエネルギーはどの程度ありますか？",
    "あなたにとって理想的な働き方や仕事環境はどのようなものですか？",
    "現在のキャリアで最も不安に感じていることは何ですか？",
    "今後身につけたいスキルや成長したい分野はありますか？",
    "ワークライフバランスについて、現在の状況と理想のバランスを教えてください。",
    "現在の職場の雰囲気や企業文化について、どのように感じていますか？",
    "給与や待遇面で感じていることがあれば教えてください。",
    "現状を変えるために、どの程度行動を起こす準備ができていますか？",
)


def format_answers(request: StagedDiagnosisRequest) -> str:
    """Answered questions only, each as 【質問N】question / 【回答】answer."""
    answers = request.answers()
    blocks = []
    for num, question in enumerate(QUESTIONS, start=1):
        answer = answers.get(f"q{num}", "").strip()
        if answer:
            blocks.append(f"【質問{num}】{question}\n【回答】{answer}\n")
    return "\n".join(blocks)


# =============================================================================
# PHASE PROMPTS
# =============================================================================

QUICK_PROMPT = """あなたは経験豊富なキャリアカウンセラーです。以下の回答から即座に基本診断を行ってください。

【回答データ】
{answers}

【即時診断要件】
- 1-2秒で判断できる明確な診断
- 簡潔で分かりやすい表現
- 即座に実行できる行動提案

【回答形式】以下のJSONで簡潔に回答:
{{
  "result_type": "転職推奨型|転職検討型|現職改善型|様子見型|要注意型",
  "confidence_level": "low|medium|high",
  "urgency_level": "low|medium|high",
  "summary": "診断結果の要約（100字以内）",
  "immediate_actions": ["今日できること1", "今日できること2", "今日できること3"],
  "estimated_detail_time": 15
}}"""

DETAILED_PROMPT = """あなたは温かく共感的なAIキャリアカウンセラーとして、この方の心に寄り添いながら、深く個別化されたパーソナル診断を実行してください。

【最重要】感情ファーストアプローチ
1. まず、この方の感情に共感し、受け入れることから始める
2. 「あなたの気持ち、よく分かります」という姿勢で一貫する
3. 強みを見つけ、価値を認め、希望を示す
4. 具体的で実行しやすいマイクロアクション（5-15分）を提案
5. 「あなたの場合は...」「あなたにとって...」の個人視点を徹底
{empathy_hint}
【回答データ】（{answered}問回答）
{answers}

【パーソナライズ分析要件】
1. この方の言葉の選び方、表現から性格・価値観を読み取る
2. この方の感情パターンと反応の傾向を分析
3. この方の状況に最適化された具体的な行動プランを設計
4. この方の強みと課題を個別に特定
5. この方の人生観・働き方観に基づいたアドバイス

【回答形式】以下のJSONで、感情共感を最重視し、「あなた」視点で完全にパーソナライズして回答:

{{
  "result_type": "転職推奨型|転職検討型|現職改善型|様子見型|要注意型",
  "confidence_level": "low|medium|high",
  "urgency_level": "low|medium|high",
  "personal_summary": "あなたの感情に共感し、強みを認め、希望を示す温かいメッセージ（250-300字）",
  "emotional_connection": {{
    "recognition": "あなたが感じている○○という気持ち、痛いほどよく分かります",
    "validation": "そう感じるのは当然で、あなたが○○だからこそです",
    "hope_message": "あなたには必ず道があります。一緒に見つけていきましょう"
  }},
  "personal_insights": {{
    "your_situation_analysis": "あなたの回答から見える、あなた独特の状況と背景",
    "emotional_pattern": "あなたの感情の動きパターンと特徴",
    "stress_response": "あなたがストレスにどう反応するかの傾向",
    "motivation_drivers": ["あなたのやる気の源1", "源2", "源3"],
    "career_strengths": ["あなたの強み1", "強み2", "強み3"],
    "growth_areas": ["あなたの成長領域1", "領域2"]
  }},
  "personalized_action_plan": {{
    "this_week": [{{"action": "今週できる具体的行動", "why_for_you": "なぜあなたに必要か", "how_to_start": "あなたに合った始め方", "expected_feeling": "期待される気持ちの変化"}}],
    "this_month": [{{"goal": "1ヶ月目標", "your_approach": "あなたに適したアプローチ", "success_indicators": ["成功指標1", "指標2"], "potential_challenges": "直面しそうな課題", "support_needed": ["必要なサポート1", "サポート2"]}}],
    "next_3_months": [{{"vision": "3ヶ月後のビジョン", "milestone_path": ["マイルストーン1", "マイルストーン2"], "decision_points": ["判断ポイント1", "ポイント2"], "backup_plans": ["代替案1", "代替案2"]}}]
  }},
  "personalized_services": [
    {{"service_category": "推奨サービス分野", "why_recommended_for_you": "推奨理由", "timing_for_you": "最適なタイミング", "expected_benefit_for_you": "得られる効果", "how_to_choose": "選ぶ際のポイント"}}
  ],
  "your_future_scenarios": {{
    "stay_current_path": {{"probability_for_you": "実現可能性", "what_happens_to_you": ["起こること1", "起こること2"], "your_risks": ["リスク1", "リスク2"], "your_success_keys": ["成功鍵1", "成功鍵2"]}},
    "change_path": {{"probability_for_you": "実現可能性", "what_happens_to_you": ["起こること1", "起こること2"], "your_risks": ["リスク1", "リスク2"], "your_success_keys": ["成功鍵1", "成功鍵2"]}}
  }}
}}"""


def build_quick_prompt(request: StagedDiagnosisRequest) -> str:
    """Prompt for the fast phase 1 model."""
    return QUICK_PROMPT.format(answers=format_answers(request))


def build_detailed_prompt(
    request: StagedDiagnosisRequest,
    empathy: Optional[EmotionalConnection] = None,
) -> str:
    """Prompt for the detailed phase 2 model, with the empathy reading as a hint."""
    empathy_hint = ""
    if empathy:
        empathy_hint = f"\n【この方の感情の読み取り】\n{empathy.recognition}\n"

    return DETAILED_PROMPT.format(
        empathy_hint=empathy_hint,
        answered=request.answered_count(),
        answers=format_answers(request),
    )
