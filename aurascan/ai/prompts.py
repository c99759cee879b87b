from __future__ import annotations

from aurascan.ai.types import ChatMessage
from aurascan.schemas.assessment import EmotionAnalysis, ResumeAnalysis, VoiceAnalysis

NO_VOICE_ANALYSIS = "No voice analysis available"


def build_resume_messages(resume_text: str, position: str, experience: str) -> list[ChatMessage]:
    system = (
        "You are an expert HR recruiter with 15+ years of experience in talent assessment. "
        "Provide honest, professional evaluations based on resume content."
    )
    user = (
        f"As an expert HR recruiter, analyze this resume for a {position} position "
        f"requiring {experience} experience.\n\n"
        "Resume content:\n"
        f"{resume_text}\n\n"
        "Provide a JSON response with:\n"
        "- skillsScore (0-100): How well skills match the position\n"
        "- experienceScore (0-100): How relevant the experience is\n"
        "- qualificationsScore (0-100): Overall qualification level\n"
        "- overallScore (0-100): Combined assessment\n"
        "- strengths: Array of 3-5 key strengths\n"
        "- weaknesses: Array of 2-3 areas for improvement\n"
        "- summary: Brief 2-sentence professional summary\n\n"
        "Be objective and professional. Base scores on actual content analysis."
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]


def build_image_messages(image_base64: str, mime_type: str = "image/jpeg") -> list[ChatMessage]:
    system = (
        "You are an expert in facial emotion analysis and behavioral psychology. "
        "Analyze facial expressions to determine emotional state, confidence level, "
        "and professional demeanor."
    )
    user = (
        "Analyze the facial expression and body language in this image. Provide a JSON response with:\n"
        "- emotion: Primary emotion detected (confident, nervous, happy, serious, calm, anxious, etc.)\n"
        "- confidence: Confidence level of the analysis (0.0-1.0)\n"
        "- moodScore: Overall mood score for professional assessment (0-100, where 70+ is positive)\n"
        "- description: Brief professional description of demeanor and suitability\n\n"
        "Focus on professional traits relevant to workplace performance."
    )
    return [
        ChatMessage(role="system", content=system),
        ChatMessage(role="user", content=user, image_url=f"data:{mime_type};base64,{image_base64}"),
    ]


def build_voice_messages(transcript: str) -> list[ChatMessage]:
    system = (
        "You are an expert in voice analysis and communication assessment. "
        "Evaluate speech patterns for professional suitability."
    )
    user = (
        "Analyze this voice transcription for emotional tone and trustworthiness indicators:\n\n"
        f'Voice content: "{transcript}"\n\n'
        "Provide JSON response with:\n"
        "- emotion: Primary emotion (confident, nervous, enthusiastic, calm, hesitant, etc.)\n"
        "- confidence: Analysis confidence (0.0-1.0)\n"
        "- tone: Communication tone (professional, friendly, casual, formal, etc.)\n"
        "- trustworthiness: Trust indicator score (0-100) based on communication style\n\n"
        "Focus on professional communication assessment."
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]


def _voice_line(voice: VoiceAnalysis | None) -> str:
    if voice is None:
        return NO_VOICE_ANALYSIS
    return (
        f"Voice Analysis: {voice.emotion} emotion, {voice.tone} tone, "
        f"trustworthiness: {voice.trustworthiness:g}/100"
    )


def build_assessment_messages(
    resume: ResumeAnalysis,
    emotion: EmotionAnalysis,
    voice: VoiceAnalysis | None,
    candidate_name: str,
    position: str,
) -> list[ChatMessage]:
    system = (
        "You are a senior HR director with 20+ years of experience making hiring decisions. "
        "Provide balanced, fair assessments based on professional criteria."
    )
    user = (
        f"As a senior HR director, provide a comprehensive hiring assessment for {candidate_name} "
        f"applying for {position}.\n\n"
        "Resume Analysis:\n"
        f"- Overall Score: {resume.overall_score:g}/100\n"
        f"- Skills Score: {resume.skills_score:g}/100\n"
        f"- Experience Score: {resume.experience_score:g}/100\n"
        f"- Strengths: {', '.join(resume.strengths)}\n"
        f"- Weaknesses: {', '.join(resume.weaknesses)}\n\n"
        "Emotion Analysis:\n"
        f"- Detected Emotion: {emotion.emotion}\n"
        f"- Mood Score: {emotion.mood_score:g}/100\n"
        f"- Confidence: {emotion.confidence:g}\n\n"
        f"{_voice_line(voice)}\n\n"
        "Provide a JSON response with:\n"
        "- moodScore: Final mood/emotional stability score (0-100)\n"
        "- moodText: Primary emotional state description\n"
        "- trustScore: Overall trustworthiness score (0-100)\n"
        "- riskScore: Risk assessment score (0-100, higher = more risk)\n"
        '- recommendation: "HIRE", "REVIEW", or "REJECT"\n'
        "- reason: 2-3 sentence explanation for the recommendation\n\n"
        "Consider all factors holistically for professional hiring decision."
    )
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]
