"""
Ranked partner-service recommendations for the detailed diagnosis.

Each catalog service is scored by keyword rules over the answers to Q1-Q5,
plus a bonus for how many questions were answered. Services scoring at least
MIN_SCORE are ranked best first and capped at MAX_RECOMMENDATIONS; the list
is topped up to MIN_RECOMMENDATIONS from the rest of the catalog.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from career_diagnosis.models.diagnosis import ServiceInfo, ServiceRecommendation

logger = logging.getLogger(__name__)

MIN_SCORE = 0.5
MAX_RECOMMENDATIONS = 8
MIN_RECOMMENDATIONS = 3

# Factors that make a recommendation urgent whatever its score
URGENT_FACTORS = ("高ストレス状態", "人間関係の悩み", "リフレッシュが必要")

DEFAULT_OUTCOME = "現状の改善と目標達成"

# =============================================================================
# SERVICE CATALOG
# =============================================================================

SERVICE_CATALOG: Sequence[ServiceInfo] = (
    ServiceInfo(
        id="taishoku-jobs",
        name="退職代行Jobs｜弁護士監修＆労働組合連携！の退職代行サービス",
        description="今すぐ辞めたいけど言い出しづらい人にぴったり。",
        category=["退職代行"],
        target_type=["疲労限界型"],
        urgency_level=["high"],
        url="http://msm.to/D5GzMLt",
        tags=["退職", "ストレス", "ブラック企業"],
    ),
    ServiceInfo(
        id="albatross",
        name="アルバトロス転職｜転職支援サービスの申し込み",
        description="総合型エージェント。幅広い求人を比較したい人向け。",
        category=["転職支援"],
        target_type=["現状維持迷い型", "成長志向型"],
        urgency_level=["medium", "low"],
        url="http://msm.to/F3DdYYm",
        tags=["転職", "キャリアアップ", "一般転職"],
    ),
    ServiceInfo(
        id="se-navi",
        name="社内SE転職ナビ｜社内SE・情シス特化の転職サイト",
        description="社内SEでワークライフバランスを目指したい IT エンジニアに。",
        category=["IT転職"],
        target_type=["疲労限界型", "現状維持迷い型"],
        urgency_level=["medium", "high"],
        url="https://px.a8.net/svt/ejp?a8mat=3Z92DF+BOXRI2+3IZO+I4FNM",
        tags=["社内SE", "IT", "ワークライフバランス"],
    ),
    ServiceInfo(
        id="m-and-a-beginners",
        name="M&A BEGINNERS｜M&A業界特化の転職エージェント",
        description="M&A 仲介・アドバイザリー業界へキャリアチェンジしたい人向け。",
        category=["転職支援"],
        target_type=["成長志向型"],
        urgency_level=["medium", "low"],
        url="http://msm.to/FRtWvpf",
        tags=["M&A", "金融", "キャリアアップ"],
    ),
    ServiceInfo(
        id="hr-career-agent",
        name="HR CAREER AGENT｜人材業界特化の転職エージェント",
        description="法人営業・キャリアアドバイザー経験を活かして人材業界へ。",
        category=["転職支援"],
        target_type=["成長志向型", "現状維持迷い型"],
        urgency_level=["medium"],
        url="http://msm.to/8W1WKda",
        tags=["人材業界", "営業", "キャリアチェンジ"],
    ),
    ServiceInfo(
        id="careerpark",
        name="キャリアパーク｜就活・転職ノウハウメディア",
        description="適職診断やガイド資料が無料でダウンロードできる総合サイト。",
        category=["転職支援"],
        target_type=["現状維持迷い型"],
        urgency_level=["low"],
        url="https://h.accesstrade.net/sp/cc?rk=0100pmwp00nyac",
        tags=["就活", "自己分析", "書類対策"],
    ),
    ServiceInfo(
        id="uzuz",
        name="第二新卒・既卒・フリーター・ニートの就職サポート【UZUZ】",
        description="20代の就業未経験・短期離職のサポートに強いエージェント。",
        category=["就職支援"],
        target_type=["現状維持迷い型", "成長志向型"],
        urgency_level=["high", "medium"],
        url="https://h.accesstrade.net/sp/cc?rk=0100pw7e00nyac",
        tags=["第二新卒", "既卒", "未経験OK"],
    ),
    ServiceInfo(
        id="tech-stock",
        name="Tech Stock｜フリーランスエンジニア向け案件紹介",
        description="高単価 × 直請け案件が豊富。独立を後押し。",
        category=["フリーランス", "IT"],
        target_type=["成長志向型"],
        urgency_level=["low", "medium"],
        url="https://px.a8.net/svt/ejp?a8mat=3Z95JB+57JUD6+3T80+5ZMCI",
        tags=["フリーランス", "エンジニア", "独立"],
    ),
    ServiceInfo(
        id="side-business-seminar",
        name="副業セミナー",
        description="会社員のまま収入の柱を増やしたい人向けのオンライン講座。",
        category=["副業", "スキルアップ"],
        target_type=["現状維持迷い型", "成長志向型"],
        urgency_level=["low"],
        url="https://h.accesstrade.net/sp/cc?rk=0100pqmy00nyac",
        tags=["副業", "稼ぐ", "リスク分散"],
    ),
    ServiceInfo(
        id="merise",
        name="MeRISE留学（ミライズ）｜フィリピン・セブ島英語留学",
        description="英語と IT を短期集中で学びながらリフレッシュ。",
        category=["スキルアップ", "留学"],
        target_type=["成長志向型"],
        urgency_level=["low"],
        url="https://px.a8.net/svt/ejp?a8mat=3Z91L1+1O52WQ+3UZ2+BZO4H",
        tags=["留学", "英語", "リフレッシュ"],
    ),
    ServiceInfo(
        id="media-labo",
        name="Media Labo｜ライティング×マーケスキルの実践型スクール",
        description="文章とマーケを両方磨きたい Web ライターの登竜門。",
        category=["スキルアップ"],
        target_type=["成長志向型"],
        urgency_level=["low"],
        url="http://msm.to/7ditacB",
        tags=["ライティング", "マーケティング", "オンライン講座"],
    ),
    ServiceInfo(
        id="resort-baito",
        name="リゾバ.com｜業界最大手のリゾートバイト求人",
        description="住み込みで貯金もリフレッシュも叶えたい人に人気。",
        category=["リゾートバイト"],
        target_type=["現状維持迷い型", "成長志向型"],
        urgency_level=["low", "medium"],
        url="https://px.a8.net/svt/ejp?a8mat=35JR28+C7ZMUY+42GS+61JSH",
        tags=["住み込み", "短期", "旅行気分"],
    ),
    ServiceInfo(
        id="kokokara-driver",
        name="ココカラ・ドライバー｜ドライバー職の無料会員登録",
        description="普通免許から挑戦できる配送ドライバー案件が豊富。",
        category=["転職支援"],
        target_type=["現状維持迷い型"],
        urgency_level=["medium"],
        url="http://msm.to/2qGWEkY",
        tags=["ドライバー", "配送", "未経験OK"],
    ),
    ServiceInfo(
        id="tsunaguba",
        name="ツナグバ｜U・I ターン支援型ジョブマッチング",
        description="地方移住してゆったり働きたい人向け。",
        category=["地方転職"],
        target_type=["成長志向型", "現状維持迷い型"],
        urgency_level=["low"],
        url="https://h.accesstrade.net/sp/cc?rk=0100pmg800nyac",
        tags=["地方移住", "ライフスタイル", "地域活性"],
    ),
)

REASON_TEMPLATES: Dict[str, str] = {
    "高ストレス状態": "現在の職場でのストレスが高い状況から、{name}が適切な解決策を提供できます。",
    "成長意欲": "あなたの成長への意欲を活かして、{name}でさらなるスキルアップが期待できます。",
    "ワークライフバランス重視": "理想とするワークライフバランスを実現するために、{name}が最適です。",
    "独立志向": "将来の独立に向けて、{name}が必要なスキルと経験を提供します。",
    "リフレッシュが必要": "現在の状況をリセットするために、{name}で新しい環境を体験することをお勧めします。",
}

OUTCOMES: Dict[str, str] = {
    "高ストレス状態": "ストレス軽減と心身の健康回復",
    "成長意欲": "新しいスキル習得とキャリアアップ",
    "ワークライフバランス重視": "プライベート時間の確保と生活の質向上",
    "独立志向": "独立準備と収入源の多様化",
    "リフレッシュが必要": "気分転換と新しい視点の獲得",
}


@dataclass
class ScoredService:
    service: ServiceInfo
    score: float
    match_factors: List[str] = field(default_factory=list)
    reason: str = ""
    priority: str = "consider"
    timing: str = "3-6months"
    expected_outcome: str = DEFAULT_OUTCOME

    def ranked(self, rank: int) -> ServiceRecommendation:
        return ServiceRecommendation(
            service=self.service,
            rank=rank,
            score=self.score,
            reason=self.reason,
            priority=self.priority,
            timing=self.timing,
            expected_outcome=self.expected_outcome,
            match_factors=self.match_factors,
        )


# =============================================================================
# KEYWORD RULES (one per question)
# =============================================================================

def _mentions(answer: str, *keywords: str) -> bool:
    return any(keyword in answer for keyword in keywords)


def _in_category(service: ServiceInfo, *names: str) -> bool:
    """Substring match against each category, so "転職支援" does not match "IT転職"."""
    return any(name in category for category in service.category for name in names)


def score_current_feelings(answer: str, service: ServiceInfo, factors: List[str]) -> float:
    """Q1: how the user feels about the current job."""
    score = 0.0
    if _mentions(answer, "ストレス", "疲れ", "辛い"):
        if _in_category(service, "退職代行"):
            score += 3
            factors.append("高ストレス状態")
        if _in_category(service, "転職支援"):
            score += 2
            factors.append("転職検討段階")

    if _mentions(answer, "成長", "スキル", "学び"):
        if _in_category(service, "スキルアップ"):
            score += 2.5
            factors.append("成長意欲")
        if "成長志向型" in service.target_type:
            score += 2
            factors.append("成長志向")

    if "やりがい" in answer and "ない" in answer:
        if _in_category(service, "転職支援", "フリーランス"):
            score += 2
            factors.append("やりがい不足")
    return score


def score_stress_factors(answer: str, service: ServiceInfo, factors: List[str]) -> float:
    """Q2: what causes the stress."""
    score = 0.0
    if _mentions(answer, "上司", "人間関係", "パワハラ"):
        if _in_category(service, "退職代行"):
            score += 3
            factors.append("人間関係の悩み")
        if service.id == "resort-baito" or _in_category(service, "地方転職"):
            score += 1.5
            factors.append("環境変化の必要性")

    if _mentions(answer, "残業", "働きすぎ", "ブラック"):
        if service.id == "se-navi":
            score += 2.5
            factors.append("ワークライフバランス重視")
        if _in_category(service, "転職支援"):
            score += 2
            factors.append("労働環境改善")

    if _mentions(answer, "スキル", "能力", "技術"):
        if _in_category(service, "スキルアップ"):
            score += 2.5
            factors.append("スキル向上必要")
    return score


def score_motivation(answer: str, service: ServiceInfo, factors: List[str]) -> float:
    """Q3: energy and motivation in the morning."""
    score = 0.0
    low_motivation = ("やる気" in answer and "ない" in answer) or ("モチベーション" in answer and "低" in answer)
    if low_motivation and _in_category(service, "リゾートバイト", "留学"):
        score += 2
        factors.append("リフレッシュが必要")

    if _mentions(answer, "頑張", "チャレンジ", "挑戦") and "成長志向型" in service.target_type:
        score += 2
        factors.append("チャレンジ精神")
    return score


def score_work_style(answer: str, service: ServiceInfo, factors: List[str]) -> float:
    """Q4: the ideal way of working."""
    score = 0.0
    if _mentions(answer, "リモート", "在宅") and _in_category(service, "フリーランス", "IT"):
        score += 2
        factors.append("リモートワーク志向")

    if _mentions(answer, "ワークライフバランス", "プライベート"):
        if service.id == "se-navi" or _in_category(service, "地方転職"):
            score += 2
            factors.append("ワークライフバランス重視")

    if _mentions(answer, "独立", "フリーランス"):
        if _in_category(service, "フリーランス"):
            score += 3
            factors.append("独立志向")
        if _in_category(service, "副業"):
            score += 2
            factors.append("副業から独立準備")
    return score


def score_career_anxiety(answer: str, service: ServiceInfo, factors: List[str]) -> float:
    """Q5: what worries the user about their career."""
    score = 0.0
    if "スキル" in answer and "不安" in answer and _in_category(service, "スキルアップ"):
        score += 2.5
        factors.append("スキル不安の解消")

    if _mentions(answer, "年収", "給料", "収入") and _in_category(service, "転職支援", "副業"):
        score += 2
        factors.append("収入向上への期待")

    if "将来" in answer and "不安" in answer and "成長志向型" in service.target_type:
        score += 2
        factors.append("将来への投資")
    return score


QUESTION_RULES = (
    ("q1", score_current_feelings),
    ("q2", score_stress_factors),
    ("q3", score_motivation),
    ("q4", score_work_style),
    ("q5", score_career_anxiety),
)


# =============================================================================
# SCORING AND RANKING
# =============================================================================

def _round_score(score: float) -> float:
    """One decimal, halves rounded up."""
    return math.floor(score * 10 + 0.5) / 10


def priority_and_timing(score: float, factors: List[str]) -> tuple:
    if score >= 4 or any(factor in URGENT_FACTORS for factor in factors):
        return "urgent", "immediate"
    if score >= 2.5:
        return "recommended", "1-3months"
    return "consider", "3-6months"


def score_service(service: ServiceInfo, answers: Mapping[str, str], rng: random.Random) -> ScoredService:
    """
    Score one service against the answers.

    Without answers every service gets a neutral 1.0. A service no rule
    matched gets a random score in [0.5, 1.0) so it can still be listed.
    """
    answered = [answer for answer in answers.values() if answer and answer.strip()]
    if not answered:
        return ScoredService(
            service=service,
            score=1.0,
            match_factors=["基本推奨"],
            reason=f"{service.description} まずは情報収集から始めてみることをおすすめします。",
            expected_outcome="現状の改善と新しい可能性の発見",
        )

    factors: List[str] = []
    score = 0.0
    for key, rule in QUESTION_RULES:
        score += rule(answers.get(key, "").lower(), service, factors)

    score += 0.5 if len(answered) >= 5 else len(answered) * 0.1

    if score < MIN_SCORE:
        score = MIN_SCORE + rng.random() * 0.5
        factors.append("基本推奨")

    priority, timing = priority_and_timing(score, factors)
    main_factor = factors[0] if factors else None
    template = REASON_TEMPLATES.get(main_factor)

    return ScoredService(
        service=service,
        score=_round_score(score),
        match_factors=factors,
        reason=template.format(name=service.name) if template else service.description,
        priority=priority,
        timing=timing,
        expected_outcome=OUTCOMES.get(main_factor, DEFAULT_OUTCOME),
    )


def fallback_recommendations(catalog: Sequence[ServiceInfo] = SERVICE_CATALOG) -> List[ServiceRecommendation]:
    """Generic picks from the head of the catalog when scoring is not possible."""
    count = max(MIN_RECOMMENDATIONS, min(5, len(catalog)))
    return [
        ScoredService(
            service=service,
            score=2.0,
            match_factors=["基本推奨"],
            reason=f"{service.description} 多くの方におすすめできるサービスです。",
            timing="1-3months",
        ).ranked(rank)
        for rank, service in enumerate(catalog[:count], start=1)
    ]


def generate_recommendations(
    answers: Mapping[str, str],
    rng: Optional[random.Random] = None,
    catalog: Sequence[ServiceInfo] = SERVICE_CATALOG,
) -> List[ServiceRecommendation]:
    """
    Ranked recommendations (rank 1 first) for answers keyed q1..q10.

    Pass a seeded rng for reproducible scores. Any failure while scoring
    yields fallback_recommendations() instead.
    """
    rng = rng or random.Random()
    try:
        scored = [score_service(service, answers, rng) for service in catalog]
        kept = sorted((s for s in scored if s.score >= MIN_SCORE), key=lambda s: s.score, reverse=True)
        recommendations = [s.ranked(rank) for rank, s in enumerate(kept[:MAX_RECOMMENDATIONS], start=1)]

        if len(recommendations) < MIN_RECOMMENDATIONS:
            taken = {rec.service.id for rec in recommendations}
            extra = [service for service in catalog if service.id not in taken][:MIN_RECOMMENDATIONS]
            for service in extra:
                recommendations.append(
                    ScoredService(
                        service=service,
                        score=1.5,
                        match_factors=["一般推奨"],
                        reason=f"{service.description} あなたの状況に応じて検討してみてください。",
                        expected_outcome="現状の改善と新しい選択肢の提供",
                    ).ranked(len(recommendations) + 1)
                )

        if not recommendations:
            recommendations = fallback_recommendations(catalog)
    except Exception as e:
        logger.warning(f"Service scoring failed, using generic recommendations: {type(e).__name__}")
        return fallback_recommendations()

    logger.debug(
        f"Recommended {len(recommendations)} services: "
        f"{[(rec.service.id, rec.score) for rec in recommendations[:3]]}"
    )
    return recommendations
