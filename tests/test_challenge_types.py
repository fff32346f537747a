"""Tests for challenge variants and grading."""

import pytest
from pydantic import ValidationError

from packetjourney.challenges.types import (
    ChallengeType,
    ChoiceChallenge,
    GradingResult,
    HeadersChallenge,
    SequenceChallenge,
    StatusCodeChallenge,
    parse_challenge,
    status_label,
)
from packetjourney.quests.catalog import QuestCatalog
from packetjourney.quests.models import QuestFilter


def method_challenge(**overrides):
    data = {
        "type": "SELECT_METHOD",
        "question": "Which method fetches data?",
        "options": ["GET", "POST", "PUT", "DELETE"],
        "answer": "GET",
        "explanation": "GET retrieves data.",
    }
    data.update(overrides)
    return parse_challenge(data)


class TestChoiceChallenge:
    def test_parses_flat_mapping(self):
        challenge = method_challenge()

        assert isinstance(challenge, ChoiceChallenge)
        assert challenge.type == ChallengeType.SELECT_METHOD
        assert [option.value for option in challenge.options] == ["GET", "POST", "PUT", "DELETE"]
        assert challenge.correct_value == "GET"

    def test_parses_config_layout(self):
        challenge = parse_challenge(
            {
                "type": "PICK_ENDPOINT",
                "config": {
                    "question": "Which endpoint?",
                    "options": ["/a", "/b"],
                    "answer": "/b",
                },
            }
        )

        assert isinstance(challenge, ChoiceChallenge)
        assert challenge.correct_value == "/b"

    def test_grade_correct_only_for_correct_value(self):
        challenge = method_challenge()

        assert challenge.grade("GET") == GradingResult(correct=True, answer_given="GET")
        for wrong in ("POST", "PUT", "DELETE"):
            assert challenge.grade(wrong).correct is False

    def test_grade_is_pure(self):
        challenge = method_challenge()

        assert challenge.grade("POST") == challenge.grade("POST")

    def test_method_options_carry_descriptions(self):
        challenge = method_challenge()

        assert challenge.options[0].description == "Retrieve data from server"

    def test_query_options_have_no_description(self):
        challenge = parse_challenge(
            {
                "type": "SELECT_QUERY",
                "question": "Fetch all users",
                "options": ["SELECT * FROM users", "DELETE FROM users"],
                "answer": "SELECT * FROM users",
            }
        )

        assert all(option.description is None for option in challenge.options)

    def test_answer_must_be_an_option(self):
        with pytest.raises(ValidationError, match="not among the options"):
            method_challenge(answer="PATCH")

    def test_options_must_be_unique(self):
        with pytest.raises(ValidationError, match="unique"):
            method_challenge(options=["GET", "GET"])

    def test_needs_two_options(self):
        with pytest.raises(ValidationError, match="at least two"):
            method_challenge(options=["GET"])

    def test_question_required(self):
        with pytest.raises(ValidationError):
            method_challenge(question="")

    def test_accepts_only_offered_strings(self):
        challenge = method_challenge()

        assert challenge.accepts("PUT")
        assert not challenge.accepts("PATCH")
        assert not challenge.accepts(None)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_challenge({"type": "PLATFORMER", "question": "Jump"})


class TestStatusCodeChallenge:
    def make(self):
        return parse_challenge(
            {
                "type": "STATUS_CODE_MATCH",
                "scenario": "No session cookie was sent.",
                "statusCodes": [200, 401, 403, 404],
                "correctCode": 401,
                "explanation": "Authentication is required.",
            }
        )

    def test_scenario_becomes_question(self):
        challenge = self.make()

        assert isinstance(challenge, StatusCodeChallenge)
        assert challenge.question == "No session cookie was sent."

    def test_option_labels_include_reason_phrase(self):
        challenge = self.make()

        assert [option.label for option in challenge.options] == [
            "200 OK",
            "401 Unauthorized",
            "403 Forbidden",
            "404 Not Found",
        ]
        assert [option.value for option in challenge.options] == [200, 401, 403, 404]

    def test_grading(self):
        challenge = self.make()

        assert challenge.grade(401).correct is True
        assert challenge.grade(403).correct is False

    def test_accepts_ints_only(self):
        challenge = self.make()

        assert challenge.accepts(404)
        assert not challenge.accepts("404")
        assert not challenge.accepts(True)
        assert not challenge.accepts(500)

    def test_correct_code_must_be_offered(self):
        with pytest.raises(ValidationError, match="not among the status codes"):
            parse_challenge(
                {
                    "type": "STATUS_CODE_MATCH",
                    "scenario": "Created",
                    "statusCodes": [200, 204],
                    "correctCode": 201,
                }
            )

    def test_rejects_non_http_codes(self):
        with pytest.raises(ValidationError, match="not an HTTP status code"):
            parse_challenge(
                {
                    "type": "STATUS_CODE_MATCH",
                    "scenario": "Odd",
                    "statusCodes": [200, 999],
                    "correctCode": 200,
                }
            )

    def test_status_label_unknown_code(self):
        assert status_label(599) == "599"


class TestSequenceChallenge:
    def make(self):
        return parse_challenge(
            {
                "type": "MIDDLEWARE_SEQUENCE",
                "config": {
                    "steps": ["rate-limit", "validate-token", "check-permissions"],
                    "correctOrder": [1, 2, 0],
                },
            }
        )

    def test_default_question_and_options(self):
        challenge = self.make()

        assert isinstance(challenge, SequenceChallenge)
        assert challenge.question.startswith("Order the middleware")
        assert [(option.label, option.value) for option in challenge.options] == [
            ("rate-limit", 0),
            ("validate-token", 1),
            ("check-permissions", 2),
        ]

    def test_grading_compares_full_order(self):
        challenge = self.make()

        assert challenge.grade([1, 2, 0]).correct is True
        assert challenge.grade((1, 2, 0)).correct is True
        assert challenge.grade([0, 1, 2]).correct is False

    def test_accepts_permutations_only(self):
        challenge = self.make()

        assert challenge.accepts([2, 0, 1])
        assert not challenge.accepts([0, 1])
        assert not challenge.accepts([0, 0, 1])
        assert not challenge.accepts("012")

    def test_correct_order_must_be_permutation(self):
        with pytest.raises(ValidationError, match="permutation"):
            parse_challenge(
                {
                    "type": "MIDDLEWARE_SEQUENCE",
                    "steps": ["a", "b"],
                    "correctOrder": [0, 0],
                }
            )


class TestHeadersChallenge:
    def make(self, headers=("Authorization",)):
        return parse_challenge(
            {
                "type": "ADD_HEADERS",
                "config": {
                    "requiredHeaders": list(headers),
                    "headerHints": {headers[0]: "hint"},
                },
            }
        )

    def test_options_are_required_headers(self):
        challenge = self.make(("Content-Type", "Accept"))

        assert isinstance(challenge, HeadersChallenge)
        assert [option.label for option in challenge.options] == ["Content-Type", "Accept"]
        assert challenge.options[0].description == "hint"

    def test_correct_value_grades_correct(self):
        challenge = self.make(("Authorization", "Content-Type"))

        assert challenge.grade(challenge.correct_value).correct is True

    def test_authorization_needs_a_scheme(self):
        challenge = self.make()

        assert challenge.grade({"Authorization": "Bearer abc"}).correct is True
        assert challenge.grade({"authorization": "Basic dXNlcjpwYXNz"}).correct is True
        assert challenge.grade({"Authorization": "abc"}).correct is False

    def test_every_header_needs_a_value(self):
        challenge = self.make(("Content-Type", "Accept"))

        assert challenge.grade({"Content-Type": "application/json"}).correct is False
        assert challenge.grade({"Content-Type": "application/json", "Accept": "  "}).correct is False

    def test_accepts_only_complete_answers(self):
        challenge = self.make(("Content-Type", "Accept"))

        assert challenge.accepts({"content-type": "application/json", "ACCEPT": "*/*"})
        assert not challenge.accepts({})
        assert not challenge.accepts({"Content-Type": "application/json"})
        assert not challenge.accepts({"Content-Type": "application/json", "Accept": ""})

    def test_non_mapping_grades_incorrect(self):
        challenge = self.make()

        result = challenge.grade("Bearer abc")

        assert result.correct is False
        assert result.answer_given == "Bearer abc"

    def test_hint_for_unrequired_header_rejected(self):
        with pytest.raises(ValidationError, match="not required"):
            parse_challenge(
                {
                    "type": "ADD_HEADERS",
                    "requiredHeaders": ["Accept"],
                    "headerHints": {"Authorization": "token"},
                }
            )


def test_grading_result_event_shape():
    result = GradingResult(correct=False, answer_given=[0, 1])

    assert result.to_event() == {"correct": False, "answer": [0, 1]}


_catalog = QuestCatalog()
BUILTIN_CHALLENGES = [
    layer.challenge
    for summary in _catalog.list_quests(QuestFilter(limit=50)).items
    for layer in _catalog.get_quest_with_layers(summary.id).layers
]


@pytest.mark.parametrize("challenge", BUILTIN_CHALLENGES, ids=lambda challenge: challenge.type)
def test_builtin_challenges_grade_only_correct_value(challenge):
    assert challenge.grade(challenge.correct_value).correct is True
    for option in challenge.options:
        if option.value != challenge.correct_value:
            assert challenge.grade(option.value).correct is False
