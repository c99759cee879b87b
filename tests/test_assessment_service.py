import json
import unittest

from aurascan.core.assessment_store import InMemoryAssessmentStore
from aurascan.core.scoring_config import get_scoring_value
from aurascan.services.analyzers import SIMULATED_TRANSCRIPT, AnalysisError
from aurascan.services.assessment_service import (
    InvalidSubmissionError,
    UploadedFile,
    parse_voice_sentiment,
    run_assessment,
    validate_submission,
)
from scoring_fakes import PNG_BYTES, RESUME_PDF, WEBM_BYTES, FakeScoringProvider


class AssessmentPipelineTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryAssessmentStore()
        self.submission = validate_submission(
            {
                "fullName": "Jane Doe",
                "email": "jane@example.com",
                "position": "Data Engineer",
                "experience": "3 years",
                "evaluationType": "trust",
            }
        )
        self.resume = UploadedFile("cv.pdf", "application/pdf", RESUME_PDF)
        self.image = UploadedFile("me.png", "image/png", PNG_BYTES)
        self.audio = UploadedFile("voice.webm", "audio/webm", WEBM_BYTES)

    async def _run(self, provider, **kwargs):
        return await run_assessment(
            provider=provider,
            store=self.store,
            submission=self.submission,
            resume=self.resume,
            image=self.image,
            **kwargs,
        )

    async def test_simulated_voice_uses_placeholder_transcript(self):
        provider = FakeScoringProvider()
        record = await self._run(provider, audio=self.audio, voice_mode="simulated")
        self.assertNotIn("transcribe", provider.calls)
        self.assertEqual(provider.voice_transcripts, [SIMULATED_TRANSCRIPT])
        self.assertEqual(json.loads(record.voice_sentiment)["source"], "simulated")

    async def test_disabled_voice_ignores_audio(self):
        provider = FakeScoringProvider()
        record = await self._run(provider, audio=self.audio, voice_mode="disabled")
        self.assertNotIn("voice", provider.calls)
        self.assertIsNone(record.voice_sentiment)
        self.assertEqual(record.audio_filename, "voice.webm")

    async def test_uploaded_audio_takes_precedence_over_client_sentiment(self):
        provider = FakeScoringProvider()
        record = await self._run(
            provider,
            audio=self.audio,
            voice_sentiment=json.dumps({"emotion": "nervous"}),
            voice_mode="transcribe",
        )
        self.assertEqual(json.loads(record.voice_sentiment)["source"], "transcribed")

    async def test_transcription_failure_aborts(self):
        provider = FakeScoringProvider(fail={"transcribe"})
        with self.assertRaises(AnalysisError) as ctx:
            await self._run(provider, audio=self.audio, voice_mode="transcribe")
        self.assertEqual(ctx.exception.kind, "voice")
        self.assertEqual(self.store.list_recent(), [])

    async def test_completed_record_is_stored(self):
        provider = FakeScoringProvider()
        record = await self._run(provider)
        self.assertEqual(record.recommendation, "HIRE")
        self.assertEqual(record.evaluation_type, "trust")
        self.assertEqual(self.store.get(record.id), record)

    async def test_oversized_upload_rejected_before_analysis(self):
        provider = FakeScoringProvider()
        with self.assertRaises(InvalidSubmissionError):
            await self._run(provider, max_upload_bytes=16)
        self.assertEqual(provider.calls, [])


class VoiceSentimentParsingTests(unittest.TestCase):
    def test_empty_values_mean_no_voice(self):
        self.assertIsNone(parse_voice_sentiment(None))
        self.assertIsNone(parse_voice_sentiment("  "))
        self.assertIsNone(parse_voice_sentiment("null"))

    def test_non_object_is_rejected(self):
        with self.assertRaises(InvalidSubmissionError):
            parse_voice_sentiment("[1, 2]")

    def test_values_are_bounded(self):
        voice = parse_voice_sentiment(json.dumps({"confidence": "0.4", "trustworthiness": 140}))
        self.assertEqual(voice.confidence, 0.4)
        self.assertEqual(voice.trustworthiness, 100)
        self.assertEqual(voice.source, "client")

    def test_huge_integers_are_bounded(self):
        raw = '{"confidence": 1' + "0" * 400 + ', "trustworthiness": -1' + "0" * 400 + "}"
        voice = parse_voice_sentiment(raw)
        self.assertEqual(voice.confidence, 1)
        self.assertEqual(voice.trustworthiness, 0)


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        self.assertEqual(get_scoring_value("analysis.assessment.temperature"), 0.4)
        self.assertEqual(get_scoring_value("resume.max_strengths"), 5)
        self.assertEqual(get_scoring_value("analysis.missing.key", "fallback"), "fallback")


if __name__ == "__main__":
    unittest.main()
