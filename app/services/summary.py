from __future__ import annotations

from typing import Iterable, Optional

from app.services.emotions import Emotion, PredominantEmotion

GENERIC_SUMMARY = "Period with diverse emotional variation"
GENERIC_RECOMMENDATION = "Keep monitoring your emotions and look for patterns that could be improved."

# Ordered keyword groups per emotion; the first group found in the week's text wins.
SUMMARY_RULES: dict[Emotion, tuple[tuple[tuple[str, ...], str], ...]] = {
    Emotion.HAPPY: (
        (("productive", "managed to", "finished", "completed", "wrapped up"),
         "Positive week focused on productivity and accomplishments"),
        (("family", "friends", "time", "people", "love"),
         "Happy period with meaningful moments of personal connection"),
        (("success", "achievement", "victory"),
         "Week marked by achievements and a sense of fulfillment"),
    ),
    Emotion.ANXIOUS: (
        (("tasks", "deadlines", "pending", "work", "due date"),
         "Anxious period driven by work overload and pressure"),
        (("decision", "choose", "worried", "doubt", "unsure"),
         "Week marked by anxiety around decision-making"),
        (("future", "fear", "uncertainty"),
         "Anxious period with worries about the future and uncertainty"),
    ),
    Emotion.CALM: (
        (("relax", "peace", "tranquil", "serene", "zen"),
         "Quiet week with moments of rest and serenity"),
        (("balance", "organized", "in control", "planned", "structured"),
         "Calm period with good time management and overall well-being"),
        (("meditation", "mindfulness", "breathing"),
         "Serene week with mindfulness practice and self-awareness"),
    ),
    Emotion.TIRED: (
        (("work", "exhausted", "too much", "overload", "overloaded"),
         "Period of fatigue caused by excessive work demands"),
        (("sleep", "energy", "insomnia", "rest", "bed"),
         "Week marked by fatigue linked to a lack of proper rest"),
        (("physical", "mental", "drained"),
         "Period of physical and mental exhaustion that calls for a break"),
    ),
    Emotion.STRESSED: (
        (("conflict", "tension", "difficult", "problem", "challenge"),
         "Stressful week with work tensions and interpersonal challenges"),
        (("pressure", "time", "overload", "urgent", "rush"),
         "Period of stress caused by overload and lack of organization"),
        (("unexpected", "change", "adapt"),
         "Stressful week with unexpected events and a need to adapt"),
    ),
}

DEFAULT_SUMMARIES = {
    Emotion.HAPPY: "Positive week with overall well-being",
    Emotion.ANXIOUS: "Anxious period with difficulty relaxing and resting",
    Emotion.CALM: "Period of calm and emotional stability",
    Emotion.TIRED: "Period of tiredness that calls for attention to rest and recovery",
    Emotion.STRESSED: "Stressful period that calls for stress-management strategies",
}

RECOMMENDATIONS = {
    Emotion.HAPPY: (
        "Keep up the activities that bring you well-being. "
        "Consider writing down what worked well so you can repeat it in the future."
    ),
    Emotion.ANXIOUS: (
        "Practice breathing techniques and mindfulness. "
        "Organize your tasks by priority and consider splitting big goals into smaller steps."
    ),
    Emotion.CALM: (
        "Keep the habits that are bringing you tranquility. "
        "Continue with self-care and organization practices."
    ),
    Emotion.TIRED: (
        "Prioritize rest and proper sleep. "
        "Consider reviewing your routine to avoid overload and set healthy limits."
    ),
    Emotion.STRESSED: (
        "Identify your main sources of stress and develop coping strategies. "
        "Exercise and practice relaxation techniques regularly."
    ),
}


def combine_texts(texts: Iterable[Optional[str]]) -> str:
    """Non-blank texts joined the way the week is presented to the model."""
    return ". ".join(t for t in texts if t and t.strip())


def summarize(emotions: Iterable[str], texts: Iterable[Optional[str]], predominant: str) -> str:
    """
    Deterministic one-sentence summary of the week.
    `emotions` is accepted for symmetry with the model input; only the joined
    texts and the predominant emotion drive the result.
    """
    combined = combine_texts(texts).lower()
    resolved = PredominantEmotion.from_label(predominant)
    if resolved.emotion is None:
        return GENERIC_SUMMARY

    for keywords, sentence in SUMMARY_RULES[resolved.emotion]:
        if any(k in combined for k in keywords):
            return sentence
    return DEFAULT_SUMMARIES[resolved.emotion]


def recommend(predominant: str) -> str:
    resolved = PredominantEmotion.from_label(predominant)
    if resolved.emotion is None:
        return GENERIC_RECOMMENDATION
    return RECOMMENDATIONS[resolved.emotion]
