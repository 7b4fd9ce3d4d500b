import json
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jdmatch.ai.errors import (  # noqa: E402
    AnalysisError,
    InvalidCredentialsError,
    MalformedResponseError,
    RateLimitedError,
    SafetyBlockedError,
)
from jdmatch.ai.retry import RetryPolicy  # noqa: E402
from jdmatch.services.analysis_service import analyze_resume, parse_analysis  # noqa: E402

RESUME_TEXT = "Jane Doe\nManaged a team of engineers.\nUsed Python for automation."
JOB_DESCRIPTION = "Engineering manager, Python, AWS, CI/CD."


def analysis_payload(**overrides) -> dict:
    payload = {
        "tech_match": 80,
        "impact_match": 60,
        "ats_compatibility": 95,
        "summary": "Good technical fit.",
        "missing_keywords": ["AWS", "CI/CD"],
        "hallucination_check": [{"skill": "Leadership", "reason": "Team size never stated."}],
        "rewrites": [
            {"original": "Managed a team of engineers.", "suggested": "Led 8 engineers.", "why": "Scope."},
            {"original": "Used Python for automation.", "suggested": "Automated QA in Python.", "why": "Impact."},
            {"original": "Jane Doe", "suggested": "Jane Doe, Engineering Manager", "why": "Headline."},
        ],
    }
    payload.update(overrides)
    return payload


class FakeAIClient:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def complete_json(self, messages):
        self.calls.append(list(messages))
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


async def _no_sleep(delay: float) -> None:
    return None


class ParseAnalysisTests(unittest.TestCase):
    def test_parses_full_report(self):
        result = parse_analysis(json.dumps(analysis_payload()))

        self.assertEqual(result.tech_match, 80)
        self.assertEqual(result.missing_keywords, ["AWS", "CI/CD"])
        self.assertEqual(result.unverified_skills[0].skill, "Leadership")
        self.assertEqual(result.rewrites[0].rationale, "Scope.")
        self.assertEqual(result.overall_match, 78)
        self.assertEqual(result.match_label, "Strong Match")

    def test_match_label_thresholds(self):
        cases = [((76, 76, 76), "Strong Match"), ((75, 75, 75), "Good Start"), ((41, 41, 41), "Good Start"), ((40, 40, 40), "Needs Work")]
        for (tech, impact, ats), label in cases:
            with self.subTest(label=label, score=tech):
                payload = analysis_payload(tech_match=tech, impact_match=impact, ats_compatibility=ats)
                self.assertEqual(parse_analysis(json.dumps(payload)).match_label, label)

    def test_fractional_scores_are_rounded(self):
        result = parse_analysis(json.dumps(analysis_payload(tech_match=87.5, impact_match=60.2)))
        self.assertEqual(result.tech_match, 88)
        self.assertEqual(result.impact_match, 60)

    def test_out_of_range_score_is_malformed(self):
        with self.assertRaises(MalformedResponseError):
            parse_analysis(json.dumps(analysis_payload(ats_compatibility=140)))

    def test_extra_rewrites_are_truncated(self):
        payload = analysis_payload()
        payload["rewrites"].append({"original": "x y z", "suggested": "a b c", "why": ""})
        result = parse_analysis(json.dumps(payload))
        self.assertEqual(len(result.rewrites), 3)

    def test_too_few_rewrites_is_malformed(self):
        payload = analysis_payload()
        payload["rewrites"] = payload["rewrites"][:2]
        with self.assertRaises(MalformedResponseError):
            parse_analysis(json.dumps(payload))

    def test_missing_optional_lists_default_to_empty(self):
        payload = analysis_payload(missing_keywords=None)
        del payload["hallucination_check"]
        result = parse_analysis(json.dumps(payload))
        self.assertEqual(result.missing_keywords, [])
        self.assertEqual(result.unverified_skills, [])

    def test_code_fenced_json_is_accepted(self):
        raw = "```json\n" + json.dumps(analysis_payload()) + "\n```"
        self.assertEqual(parse_analysis(raw).impact_match, 60)

    def test_invalid_json_is_malformed(self):
        with self.assertRaises(MalformedResponseError):
            parse_analysis("Sure! Here is your analysis: {")

    def test_non_object_json_is_malformed(self):
        with self.assertRaises(MalformedResponseError):
            parse_analysis("[1, 2, 3]")


class AnalyzeResumeTests(unittest.IsolatedAsyncioTestCase):
    async def test_prompt_carries_job_description_and_resume(self):
        client = FakeAIClient(json.dumps(analysis_payload()))

        result = await analyze_resume(RESUME_TEXT, JOB_DESCRIPTION, client=client, sleep=_no_sleep)

        self.assertEqual(result.ats_compatibility, 95)
        system, user = client.calls[0]
        self.assertEqual(system.role, "system")
        self.assertIn("character-for-character", system.content)
        self.assertEqual(user.content, f"Job Description:\n{JOB_DESCRIPTION}\n\nResume:\n{RESUME_TEXT}")

    async def test_rate_limited_call_is_retried(self):
        client = FakeAIClient(RateLimitedError(), json.dumps(analysis_payload()))

        result = await analyze_resume(RESUME_TEXT, JOB_DESCRIPTION, client=client, sleep=_no_sleep)

        self.assertEqual(len(client.calls), 2)
        self.assertEqual(result.tech_match, 80)

    async def test_exhausted_retries_raise_rate_limited(self):
        client = FakeAIClient(RateLimitedError(), RateLimitedError())

        with self.assertRaises(RateLimitedError):
            await analyze_resume(
                RESUME_TEXT,
                JOB_DESCRIPTION,
                client=client,
                policy=RetryPolicy(max_attempts=2, backoff_seconds=0.0),
                sleep=_no_sleep,
            )

    async def test_safety_rejection_is_not_retried(self):
        client = FakeAIClient(SafetyBlockedError(), json.dumps(analysis_payload()))

        with self.assertRaises(SafetyBlockedError):
            await analyze_resume(RESUME_TEXT, JOB_DESCRIPTION, client=client, sleep=_no_sleep)
        self.assertEqual(len(client.calls), 1)

    async def test_malformed_answer_is_not_retried(self):
        client = FakeAIClient("not json", json.dumps(analysis_payload()))

        with self.assertRaises(MalformedResponseError):
            await analyze_resume(RESUME_TEXT, JOB_DESCRIPTION, client=client, sleep=_no_sleep)
        self.assertEqual(len(client.calls), 1)

    async def test_unsupported_provider_is_reported(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "watson"}):
            with self.assertRaises(AnalysisError) as ctx:
                await analyze_resume(RESUME_TEXT, JOB_DESCRIPTION, sleep=_no_sleep)
        self.assertEqual(ctx.exception.code, "provider_unsupported")

    async def test_missing_api_key_is_a_credentials_error(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "openai", "OPENAI_API_KEY": ""}):
            with self.assertRaises(InvalidCredentialsError):
                await analyze_resume(RESUME_TEXT, JOB_DESCRIPTION, sleep=_no_sleep)


if __name__ == "__main__":
    unittest.main()
