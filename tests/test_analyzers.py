import unittest

from aurascan.schemas.assessment import EmotionAnalysis, ResumeAnalysis
from aurascan.services.analyzers import (
    AnalysisError,
    analyze_image,
    analyze_resume,
    analyze_voice,
    clamp_score,
    generate_comprehensive_assessment,
)
from scoring_fakes import FakeScoringProvider


def _resume() -> ResumeAnalysis:
    return ResumeAnalysis(
        skills_score=70,
        experience_score=60,
        qualifications_score=65,
        overall_score=66,
        strengths=["Python"],
        weaknesses=["Public speaking"],
        summary="Solid.",
    )


def _emotion(mood: float = 64, emotion: str = "calm") -> EmotionAnalysis:
    return EmotionAnalysis(emotion=emotion, confidence=0.8, mood_score=mood, description="Relaxed.")


class ClampScoreTests(unittest.TestCase):
    def test_clamps_into_range(self):
        self.assertEqual(clamp_score(150, 0, 100, 50), 100)
        self.assertEqual(clamp_score(-20, 0, 100, 50), 0)
        self.assertEqual(clamp_score(1.7, 0, 1, 0.7), 1)

    def test_missing_or_invalid_uses_default(self):
        self.assertEqual(clamp_score(None, 0, 100, 50), 50)
        self.assertEqual(clamp_score("high", 0, 100, 50), 50)
        self.assertEqual(clamp_score(True, 0, 100, 50), 50)
        self.assertEqual(clamp_score(float("nan"), 0, 100, 50), 50)
        self.assertEqual(clamp_score([80], 0, 100, 50), 50)

    def test_numeric_strings_and_zero_are_kept(self):
        self.assertEqual(clamp_score("85", 0, 100, 50), 85)
        self.assertEqual(clamp_score(0, 0, 100, 50), 0)

    def test_huge_integers_clamp_by_sign(self):
        self.assertEqual(clamp_score(10**400, 0, 100, 50), 100)
        self.assertEqual(clamp_score(-(10**400), 0, 100, 50), 0)
        self.assertEqual(clamp_score(10**400, 0, 1, 0.7), 1)
        self.assertEqual(clamp_score("1e400", 0, 100, 50), 100)


class ResumeAnalyzerTests(unittest.IsolatedAsyncioTestCase):
    async def test_out_of_range_scores_are_clamped(self):
        provider = FakeScoringProvider(
            resume={
                "skillsScore": 140,
                "experienceScore": -5,
                "qualificationsScore": "90",
                "overallScore": 101.5,
                "strengths": ["a", "b", "c", "d", "e", "f", "g"],
                "weaknesses": ["x", "y", "z", "w"],
                "summary": "Fine.",
            }
        )
        result = await analyze_resume(provider, "resume text", "Backend Engineer", "5 years")
        self.assertEqual(result.skills_score, 100)
        self.assertEqual(result.experience_score, 0)
        self.assertEqual(result.qualifications_score, 90)
        self.assertEqual(result.overall_score, 100)
        self.assertEqual(result.strengths, ["a", "b", "c", "d", "e"])
        self.assertEqual(result.weaknesses, ["x", "y", "z"])

    async def test_missing_fields_use_defaults(self):
        provider = FakeScoringProvider(resume={})
        result = await analyze_resume(provider, "resume text", "Designer", "2 years")
        self.assertEqual(result.skills_score, 50)
        self.assertEqual(result.experience_score, 50)
        self.assertEqual(result.qualifications_score, 50)
        self.assertEqual(result.overall_score, 50)
        self.assertEqual(result.strengths, ["Professional background"])
        self.assertEqual(result.weaknesses, ["Areas for growth"])
        self.assertEqual(result.summary, "Professional candidate with relevant background.")

    async def test_provider_failure_is_wrapped(self):
        provider = FakeScoringProvider(fail={"resume"})
        with self.assertRaises(AnalysisError) as ctx:
            await analyze_resume(provider, "resume text", "Designer", "2 years")
        self.assertEqual(str(ctx.exception), "Failed to analyze resume with AI")
        self.assertEqual(ctx.exception.kind, "resume")

    async def test_non_object_payload_is_an_error(self):
        provider = FakeScoringProvider(resume=["not", "an", "object"])
        with self.assertRaises(AnalysisError):
            await analyze_resume(provider, "resume text", "Designer", "2 years")

    async def test_slow_provider_times_out(self):
        provider = FakeScoringProvider(delay_s=0.5)
        with self.assertRaises(AnalysisError):
            await analyze_resume(provider, "resume text", "Designer", "2 years", timeout_s=0.01)


class ImageAnalyzerTests(unittest.IsolatedAsyncioTestCase):
    async def test_bounds_and_defaults(self):
        provider = FakeScoringProvider(image={"confidence": 3, "moodScore": 250})
        result = await analyze_image(provider, "aGVsbG8=", "image/png")
        self.assertEqual(result.emotion, "neutral")
        self.assertEqual(result.confidence, 1)
        self.assertEqual(result.mood_score, 100)
        self.assertEqual(result.description, "Professional appearance with neutral demeanor.")

    async def test_empty_payload_defaults(self):
        provider = FakeScoringProvider(image={})
        result = await analyze_image(provider, "aGVsbG8=")
        self.assertEqual(result.confidence, 0.7)
        self.assertEqual(result.mood_score, 70)

    async def test_failure_is_wrapped(self):
        provider = FakeScoringProvider(fail={"image"})
        with self.assertRaises(AnalysisError) as ctx:
            await analyze_image(provider, "aGVsbG8=")
        self.assertEqual(str(ctx.exception), "Failed to analyze image with AI")


class VoiceAnalyzerTests(unittest.IsolatedAsyncioTestCase):
    async def test_bounds_and_source(self):
        provider = FakeScoringProvider(voice={"confidence": -1, "trustworthiness": 300, "tone": "formal"})
        result = await analyze_voice(provider, "Hello there", source="transcribed")
        self.assertEqual(result.confidence, 0)
        self.assertEqual(result.trustworthiness, 100)
        self.assertEqual(result.tone, "formal")
        self.assertEqual(result.emotion, "neutral")
        self.assertEqual(result.source, "transcribed")

    async def test_failure_is_wrapped(self):
        provider = FakeScoringProvider(fail={"voice"})
        with self.assertRaises(AnalysisError) as ctx:
            await analyze_voice(provider, "Hello there")
        self.assertEqual(str(ctx.exception), "Failed to analyze voice with AI")


class AggregatorTests(unittest.IsolatedAsyncioTestCase):
    async def test_unknown_recommendation_maps_to_review(self):
        for value in ("MAYBE", "hire", "", None, 1, "REJECT "):
            provider = FakeScoringProvider(candidate={"recommendation": value})
            result = await generate_comprehensive_assessment(provider, _resume(), _emotion(), None, "Ann", "QA")
            self.assertEqual(result.recommendation, "REVIEW", value)

    async def test_valid_recommendations_pass_through(self):
        for value in ("HIRE", "REVIEW", "REJECT"):
            provider = FakeScoringProvider(candidate={"recommendation": value})
            result = await generate_comprehensive_assessment(provider, _resume(), _emotion(), None, "Ann", "QA")
            self.assertEqual(result.recommendation, value)

    async def test_missing_fields_fall_back_to_image_and_fixed_defaults(self):
        provider = FakeScoringProvider(candidate={})
        result = await generate_comprehensive_assessment(
            provider, _resume(), _emotion(mood=64, emotion="calm"), None, "Ann", "QA"
        )
        self.assertEqual(result.mood_score, 64)
        self.assertEqual(result.mood_text, "calm")
        self.assertEqual(result.trust_score, 70)
        self.assertEqual(result.risk_score, 30)
        self.assertEqual(result.recommendation, "REVIEW")
        self.assertEqual(result.reason, "Comprehensive assessment completed based on available data.")

    async def test_scores_are_clamped(self):
        provider = FakeScoringProvider(
            candidate={"moodScore": 120, "trustScore": -4, "riskScore": 999, "recommendation": "REJECT"}
        )
        result = await generate_comprehensive_assessment(provider, _resume(), _emotion(), None, "Ann", "QA")
        self.assertEqual(result.mood_score, 100)
        self.assertEqual(result.trust_score, 0)
        self.assertEqual(result.risk_score, 100)

    async def test_huge_scores_are_clamped_not_failed(self):
        provider = FakeScoringProvider(candidate={"moodScore": 10**400, "trustScore": -(10**400)})
        result = await generate_comprehensive_assessment(provider, _resume(), _emotion(), None, "Ann", "QA")
        self.assertEqual(result.mood_score, 100)
        self.assertEqual(result.trust_score, 0)

    async def test_absent_voice_is_passed_as_none(self):
        provider = FakeScoringProvider()
        await generate_comprehensive_assessment(provider, _resume(), _emotion(), None, "Ann", "QA")
        self.assertIsNone(provider.candidate_inputs[0]["voice"])

    async def test_failure_is_wrapped(self):
        provider = FakeScoringProvider(fail={"candidate"})
        with self.assertRaises(AnalysisError) as ctx:
            await generate_comprehensive_assessment(provider, _resume(), _emotion(), None, "Ann", "QA")
        self.assertEqual(str(ctx.exception), "Failed to generate comprehensive assessment")


if __name__ == "__main__":
    unittest.main()
