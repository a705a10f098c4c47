"""Tests for the form validators."""

from datetime import datetime, timedelta, timezone

import pytest

from tzguard.core.policy import SecurityPolicy
from tzguard.schemas.forms import AuthCredentialsRequest, LinkCreationRequest
from tzguard.services.validation import (
    FieldRules,
    Rule,
    ValidationResult,
    apply_rules,
    parse_instant,
    validate_auth_credentials,
    validate_form,
    validate_link_creation,
    validate_user_profile,
)

NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestValidationResult:
    def test_is_valid_derived_from_errors(self) -> None:
        assert ValidationResult().is_valid is True
        assert ValidationResult(errors={"email": "bad"}).is_valid is False

    def test_to_dict(self) -> None:
        assert ValidationResult(errors={"x": "y"}).to_dict() == {
            "is_valid": False,
            "errors": {"x": "y"},
        }


class TestAuthCredentials:
    def test_valid_login(self) -> None:
        result = validate_auth_credentials({"email": "a@b.com", "password": "longenough1"})
        assert result.is_valid is True
        assert result.errors == {}

    def test_bad_email_and_short_password_reported_together(self) -> None:
        result = validate_auth_credentials({"email": "bad", "password": "short"})

        assert result.is_valid is False
        assert set(result.errors) == {"email", "password"}
        assert result.errors["email"] == "Please enter a valid email address"
        assert result.errors["password"] == "Password must be at least 8 characters long"

    def test_missing_fields_are_required(self) -> None:
        result = validate_auth_credentials({})

        assert result.errors == {
            "email": "Email is required",
            "password": "Password is required",
        }

    def test_confirm_mismatch_only_flags_confirm(self) -> None:
        result = validate_auth_credentials(
            {"email": "a@b.com", "password": "longenough1", "confirm_password": "different"}
        )

        assert result.is_valid is False
        assert result.errors == {"confirm_password": "Passwords do not match"}

    def test_confirm_match_is_valid(self) -> None:
        result = validate_auth_credentials(
            {"email": "a@b.com", "password": "longenough1", "confirm_password": "longenough1"}
        )
        assert result.is_valid is True

    def test_empty_confirm_is_still_a_signup(self) -> None:
        result = validate_auth_credentials(
            {"email": "a@b.com", "password": "longenough1", "confirm_password": ""}
        )
        assert "confirm_password" in result.errors

    def test_login_path_skips_confirm(self) -> None:
        result = validate_auth_credentials(
            {"email": "a@b.com", "password": "longenough1", "confirm_password": None}
        )
        assert result.is_valid is True

    def test_exactly_eight_characters_is_enough(self) -> None:
        result = validate_auth_credentials({"email": "a@b.com", "password": "12345678"})
        assert result.is_valid is True

    @pytest.mark.parametrize(
        "email",
        ["plain", "a@b", "a b@c.com", "a@b .com", "@b.com", "a@@b.com", "a@b.com\n"],
    )
    def test_invalid_emails(self, email: str) -> None:
        result = validate_auth_credentials({"email": email, "password": "longenough1"})
        assert result.errors == {"email": "Please enter a valid email address"}

    def test_accepts_pydantic_model_with_aliases(self) -> None:
        payload = AuthCredentialsRequest.model_validate(
            {"email": "a@b.com", "password": "longenough1", "confirmPassword": "nope"}
        )

        result = validate_auth_credentials(payload)
        assert result.errors == {"confirm_password": "Passwords do not match"}

    def test_non_string_values_become_field_errors(self) -> None:
        result = validate_auth_credentials({"email": 42, "password": ["x"] * 10})
        assert set(result.errors) == {"email", "password"}


class TestUserProfile:
    def test_empty_profile_is_valid(self) -> None:
        assert validate_user_profile({}).is_valid is True

    def test_all_fields_valid(self) -> None:
        result = validate_user_profile(
            {
                "display_name": "Ana Souza",
                "username": "ana_souza-1",
                "bio": "Remote-first PM",
                "email": "ana@example.com",
                "website": "https://ana.example.com/about",
            }
        )
        assert result.is_valid is True

    def test_each_field_reported_independently(self) -> None:
        result = validate_user_profile(
            {
                "display_name": "x" * 101,
                "username": "ab",
                "bio": "y" * 501,
                "email": "nope",
                "website": "not a url",
            }
        )

        assert result.errors == {
            "display_name": "Display name must be less than 100 characters",
            "username": (
                "Username must be 3-50 characters and contain only letters, "
                "numbers, underscores, and hyphens"
            ),
            "bio": "Bio must be less than 500 characters",
            "email": "Please enter a valid email address",
            "website": "Please enter a valid website URL",
        }

    def test_length_limits_are_inclusive(self) -> None:
        result = validate_user_profile({"display_name": "x" * 100, "bio": "y" * 500})
        assert result.is_valid is True

    @pytest.mark.parametrize("username", ["abc", "a" * 50, "A_b-9"])
    def test_valid_usernames(self, username: str) -> None:
        assert validate_user_profile({"username": username}).is_valid is True

    @pytest.mark.parametrize("username", ["ab", "a" * 51, "has space", "dot.name", "ümlaut"])
    def test_invalid_usernames(self, username: str) -> None:
        assert "username" in validate_user_profile({"username": username}).errors

    @pytest.mark.parametrize("website", ["example.com", "//example.com", "http://", "ht tp://x"])
    def test_relative_or_broken_urls_rejected(self, website: str) -> None:
        assert "website" in validate_user_profile({"website": website}).errors

    def test_only_failing_field_reported(self) -> None:
        result = validate_user_profile({"username": "valid_name", "email": "bad"})
        assert set(result.errors) == {"email"}


class TestLinkCreation:
    def test_valid_link(self) -> None:
        result = validate_link_creation(
            {"title": "Standup", "scheduled_time": NOW + timedelta(hours=1)}, now=NOW
        )
        assert result.is_valid is True

    def test_blank_title_and_past_time_reported_together(self) -> None:
        result = validate_link_creation(
            {"title": "", "scheduled_time": NOW - timedelta(days=1)}, now=NOW
        )

        assert result.errors == {
            "title": "Title is required",
            "scheduled_time": "Scheduled time cannot be in the past",
        }

    def test_whitespace_title_is_blank(self) -> None:
        result = validate_link_creation({"title": "   ", "scheduled_time": NOW}, now=NOW)
        assert result.errors == {"title": "Title is required"}

    def test_exactly_now_is_accepted(self) -> None:
        result = validate_link_creation({"title": "Now", "scheduled_time": NOW}, now=NOW)
        assert result.is_valid is True

    def test_one_microsecond_in_the_past_is_rejected(self) -> None:
        result = validate_link_creation(
            {"title": "Late", "scheduled_time": NOW - timedelta(microseconds=1)}, now=NOW
        )
        assert result.errors == {"scheduled_time": "Scheduled time cannot be in the past"}

    def test_title_and_description_limits(self) -> None:
        result = validate_link_creation(
            {"title": "t" * 201, "description": "d" * 1001, "scheduled_time": NOW},
            now=NOW,
        )

        assert result.errors == {
            "title": "Title must be less than 200 characters",
            "description": "Description must be less than 1000 characters",
        }

    def test_limits_are_inclusive(self) -> None:
        result = validate_link_creation(
            {"title": "t" * 200, "description": "d" * 1000, "scheduled_time": NOW},
            now=NOW,
        )
        assert result.is_valid is True

    @pytest.mark.parametrize("scheduled", [None, "", "tomorrow", "2030-13-45T00:00:00", 12345])
    def test_malformed_time_is_a_field_error(self, scheduled) -> None:
        result = validate_link_creation({"title": "x", "scheduled_time": scheduled}, now=NOW)
        assert result.errors == {"scheduled_time": "Valid scheduled time is required"}

    def test_iso_strings_are_parsed(self) -> None:
        result = validate_link_creation(
            {"title": "x", "scheduled_time": "2030-06-01T13:00:00+00:00"}, now=NOW
        )
        assert result.is_valid is True

    def test_offsets_are_compared_as_instants(self) -> None:
        # 13:30 at +02:00 is 11:30 UTC, before NOW
        result = validate_link_creation(
            {"title": "x", "scheduled_time": "2030-06-01T13:30:00+02:00"}, now=NOW
        )
        assert "scheduled_time" in result.errors

    def test_naive_times_are_utc(self) -> None:
        result = validate_link_creation(
            {"title": "x", "scheduled_time": datetime(2030, 6, 1, 12, 0)}, now=NOW
        )
        assert result.is_valid is True

    def test_naive_now_is_utc(self) -> None:
        result = validate_link_creation(
            {"title": "x", "scheduled_time": NOW}, now=datetime(2030, 6, 1, 12, 0)
        )
        assert result.is_valid is True

    def test_default_now_is_current_time(self) -> None:
        future = datetime.now(timezone.utc) + timedelta(minutes=5)
        past = datetime.now(timezone.utc) - timedelta(minutes=5)

        assert validate_link_creation({"title": "x", "scheduled_time": future}).is_valid
        assert not validate_link_creation({"title": "x", "scheduled_time": past}).is_valid

    def test_timezone_checked_when_given(self) -> None:
        ok = validate_link_creation(
            {"title": "x", "scheduled_time": NOW, "timezone": "Europe/Lisbon"}, now=NOW
        )
        bad = validate_link_creation(
            {"title": "x", "scheduled_time": NOW, "timezone": "Nowhere/Land"}, now=NOW
        )

        assert ok.is_valid is True
        assert bad.errors == {"timezone": "Please select a valid timezone"}

    def test_accepts_pydantic_model(self) -> None:
        payload = LinkCreationRequest.model_validate(
            {"title": "Sync", "scheduledTime": "2030-06-02T09:00:00Z"}
        )
        assert validate_link_creation(payload, now=NOW).is_valid is True


class TestRuleEngine:
    def test_messages_follow_policy(self) -> None:
        policy = SecurityPolicy(max_title_length=5)
        result = validate_link_creation(
            {"title": "too long", "scheduled_time": NOW}, now=NOW, policy=policy
        )
        assert result.errors == {"title": "Title must be less than 5 characters"}

    def test_first_failing_rule_wins(self) -> None:
        rules = {
            "code": FieldRules(
                rules=(
                    Rule(lambda v, ctx: v.startswith("A"), "must start with A"),
                    Rule(lambda v, ctx: len(v) == 3, "must be 3 long"),
                )
            )
        }

        assert apply_rules("demo", rules, {"code": "B"}).errors == {"code": "must start with A"}
        assert apply_rules("demo", rules, {"code": "A"}).errors == {"code": "must be 3 long"}

    def test_raising_predicate_is_a_field_error(self) -> None:
        rules = {"n": FieldRules(rules=(Rule(lambda v, ctx: int(v) > 0, "must be positive"),))}
        assert apply_rules("demo", rules, {"n": "abc"}).errors == {"n": "must be positive"}

    def test_validate_form_uses_registry(self) -> None:
        result = validate_form("auth_credentials", {"email": "bad", "password": "short"})
        assert set(result.errors) == {"email", "password"}

    def test_unknown_form(self) -> None:
        with pytest.raises(KeyError):
            validate_form("nope", {})

    def test_none_data_is_empty_form(self) -> None:
        assert set(validate_auth_credentials(None).errors) == {"email", "password"}


def test_parse_instant() -> None:
    assert parse_instant("2030-06-01T12:00:00Z") == NOW
    assert parse_instant("garbage") is None
    assert parse_instant(None) is None
