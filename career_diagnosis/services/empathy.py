"""
Empathetic advisor: reads the emotional tone of the answers.

A keyword count over all answers picks the primary emotion; the matching
template becomes the emotional_connection of the detailed diagnosis, in
place of whatever the model wrote.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Mapping

from career_diagnosis.models.diagnosis import EmotionalConnection

Emotion = Literal["stress", "anxiety", "frustration", "sadness", "confusion", "hope"]
Intensity = Literal["low", "medium", "high"]

EMOTION_KEYWORDS: Dict[str, List[str]] = {
    "stress": ["ストレス", "疲れ", "辛い", "限界", "きつい"],
    "anxiety": ["不安", "心配", "怖い", "迷い", "分からない"],
    "frustration": ["イライラ", "腹立つ", "うざい", "ムカつく", "理不尽"],
    "sadness": ["悲しい", "虚しい", "寂しい", "落ち込む", "やるせない"],
    "confusion": ["分からない", "迷う", "混乱", "どうしたら", "困る"],
    "hope": ["成長", "向上", "頑張", "チャレンジ", "挑戦"],
}

SUPPORT_NEEDS: Dict[str, List[str]] = {
    "stress": ["情緒的サポート", "ストレス軽減策", "休息の確保"],
    "anxiety": ["安心感の提供", "情報提供", "段階的アプローチ"],
    "frustration": ["感情の受容", "建設的な発散方法", "問題解決策"],
    "sadness": ["共感と理解", "希望の再構築", "つながりの回復"],
    "confusion": ["情報整理", "選択肢の明確化", "意思決定支援"],
    "hope": ["成長支援", "チャレンジ機会", "スキル向上"],
}

EMPATHY_TEMPLATES: Dict[str, EmotionalConnection] = {
    "stress": EmotionalConnection(
        recognition="あなたが毎日感じている重圧やストレス、本当によく分かります。「もう限界かも...」と思う気持ち、その辛さは痛いほど伝わってきます。",
        validation="こんなにストレスを感じるのは、あなたが責任感が強く、真面目に取り組んでいる証拠です。あなたが悪いわけでは決してありません。",
        hope_message="でも大丈夫。今のあなたには、必ず抜け出す道があります。一人で抱え込まず、一緒に歩んでいきましょう。",
    ),
    "anxiety": EmotionalConnection(
        recognition="将来への不安、「この先どうなるんだろう...」という心配、その気持ちとてもよく分かります。夜眠れないこともあるかもしれませんね。",
        validation="不安を感じるのは、あなたが慎重で、しっかり考える人だからです。その慎重さは、実はとても大切な強みなのです。",
        hope_message="不安の正体が見えてくれば、必ず道筋も見えてきます。あなたには乗り越える力があります。一歩ずつ、確実に進んでいきましょう。",
    ),
    "frustration": EmotionalConnection(
        recognition="理不尽な状況にイライラする気持ち、「なんでこんなことに...」という怒り、その感情を抱くのは当然です。我慢の限界を感じているのですね。",
        validation="怒りを感じるのは、あなたに正義感があり、物事の本質を見抜く力があるからです。その感受性は貴重な才能です。",
        hope_message="その怒りのエネルギーを、建設的な変化の力に変えていくことができます。あなたの情熱は、必ず良い方向に導いてくれるはずです。",
    ),
}


@dataclass
class EmotionalState:
    primary_emotion: Emotion
    intensity: Intensity
    support_needs: List[str] = field(default_factory=list)


def analyze_emotional_state(answers: Mapping[str, str]) -> EmotionalState:
    """
    Primary emotion and its intensity from keyword counts over all answers.

    Ties go to the emotion listed first in EMOTION_KEYWORDS, so answers
    without any keyword read as low-intensity stress.
    """
    all_text = " ".join(answers.values()).lower()

    best_emotion, best_score = "stress", 0
    for emotion, keywords in EMOTION_KEYWORDS.items():
        score = sum(all_text.count(keyword) for keyword in keywords)
        if score > best_score:
            best_emotion, best_score = emotion, score

    if best_score >= 3:
        intensity = "high"
    elif best_score >= 1:
        intensity = "medium"
    else:
        intensity = "low"

    return EmotionalState(
        primary_emotion=best_emotion,
        intensity=intensity,
        support_needs=list(SUPPORT_NEEDS.get(best_emotion, ["総合的サポート"])),
    )


def generate_empathetic_message(state: EmotionalState) -> EmotionalConnection:
    """Empathy template for the primary emotion (stress template when there is none)."""
    return EMPATHY_TEMPLATES.get(state.primary_emotion, EMPATHY_TEMPLATES["stress"])
