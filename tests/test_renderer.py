"""Tests for email and SMS template rendering."""

from datetime import datetime, timezone

import pytest

from revboost_notifier.enums import Channel, ContentType, NotificationKind
from revboost_notifier.errors import ValidationError
from revboost_notifier.models import MessageFields
from revboost_notifier.renderer import (
    TemplateRenderer,
    star_rating,
    substitute_placeholders,
)


def _review_fields(**overrides: object) -> MessageFields:
    values: dict[str, object] = {
        "customer_name": "Jane",
        "business_name": "Acme",
        "review_link": "https://g.co/r",
    }
    values.update(overrides)
    return MessageFields(**values)  # type: ignore[arg-type]


def _feedback_fields(**overrides: object) -> MessageFields:
    values: dict[str, object] = {
        "business_name": "Acme",
        "rating": 2,
        "feedback": "Cold coffee",
        "customer_name": "Jane",
    }
    values.update(overrides)
    return MessageFields(**values)  # type: ignore[arg-type]


class TestEmailReviewRequest:
    def test_subject_uses_business_name(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST, Channel.EMAIL, _review_fields()
        )

        assert message.subject == "We'd love to hear your feedback on Acme"
        assert message.content_type == ContentType.HTML

    def test_body_contains_fields(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST, Channel.EMAIL, _review_fields()
        )

        assert "Hello Jane," in message.body
        assert 'href="https://g.co/r"' in message.body
        assert ">Leave a Review</a>" in message.body
        assert "&copy; 2025 Acme. All rights reserved." in message.body

    def test_deterministic_with_fixed_clock(self, renderer: TemplateRenderer) -> None:
        first = renderer.render(
            NotificationKind.REVIEW_REQUEST, Channel.EMAIL, _review_fields()
        )
        second = renderer.render(
            NotificationKind.REVIEW_REQUEST, Channel.EMAIL, _review_fields()
        )

        assert first == second

    def test_script_in_customer_name_is_escaped(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST,
            Channel.EMAIL,
            _review_fields(customer_name="<script>alert(1)</script>"),
        )

        assert "<script>" not in message.body
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in message.body

    def test_review_link_is_escaped_in_href(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST,
            Channel.EMAIL,
            _review_fields(review_link='https://g.co/r?a=1&b="x"'),
        )

        assert 'href="https://g.co/r?a=1&amp;b=&quot;x&quot;"' in message.body

    def test_custom_button_text_is_escaped(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST,
            Channel.EMAIL,
            _review_fields(button_text="<b>Rate us</b>"),
        )

        assert "&lt;b&gt;Rate us&lt;/b&gt;</a>" in message.body
        assert "<b>Rate us</b>" not in message.body

    def test_subject_is_not_html_escaped(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST,
            Channel.EMAIL,
            _review_fields(business_name="Ben & Jerry's"),
        )

        assert message.subject == "We'd love to hear your feedback on Ben & Jerry's"
        assert "Ben &amp; Jerry&#039;s" in message.body

    @pytest.mark.parametrize("missing", ["customer_name", "business_name", "review_link"])
    def test_missing_required_field_raises(
        self, renderer: TemplateRenderer, missing: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            renderer.render(
                NotificationKind.REVIEW_REQUEST,
                Channel.EMAIL,
                _review_fields(**{missing: None}),
            )

        assert exc_info.value.field == missing


class TestEmailTest:
    def test_fixed_subject(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(NotificationKind.TEST, Channel.EMAIL, MessageFields())

        assert message.subject == "RevBoost Email Test"

    def test_timestamp_comes_from_clock(self) -> None:
        renderer = TemplateRenderer(
            clock=lambda: datetime(2031, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        )

        message = renderer.render(NotificationKind.TEST, Channel.EMAIL, MessageFields())

        assert "Sent: 2031-01-02 03:04:05 UTC" in message.body
        assert "&copy; 2031 RevBoost." in message.body


class TestEmailFeedbackAlert:
    def test_fixed_subject(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.FEEDBACK_ALERT, Channel.EMAIL, _feedback_fields()
        )

        assert message.subject == "⚠️ Negative Review Blocked - Customer Feedback"

    def test_stars_and_rating(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.FEEDBACK_ALERT, Channel.EMAIL, _feedback_fields(rating=2)
        )

        assert "★★☆☆☆ (2/5)" in message.body

    def test_feedback_text_is_escaped(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.FEEDBACK_ALERT,
            Channel.EMAIL,
            _feedback_fields(feedback="<img src=x onerror=alert(1)>"),
        )

        assert "<img" not in message.body
        assert "&lt;img src=x onerror=alert(1)&gt;" in message.body

    def test_anonymous_customer_default(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.FEEDBACK_ALERT,
            Channel.EMAIL,
            _feedback_fields(customer_name=None),
        )

        assert "<strong>Customer:</strong> Anonymous Customer" in message.body

    def test_optional_link_rendered_when_present(self, renderer: TemplateRenderer) -> None:
        without = renderer.render(
            NotificationKind.FEEDBACK_ALERT, Channel.EMAIL, _feedback_fields()
        )
        with_link = renderer.render(
            NotificationKind.FEEDBACK_ALERT,
            Channel.EMAIL,
            _feedback_fields(review_link="https://app.example.com/f/1"),
        )

        assert "View this feedback" not in without.body
        assert 'href="https://app.example.com/f/1"' in with_link.body

    def test_sms_channel_not_supported(self, renderer: TemplateRenderer) -> None:
        with pytest.raises(ValidationError) as exc_info:
            renderer.render(NotificationKind.FEEDBACK_ALERT, Channel.SMS, _feedback_fields())

        assert exc_info.value.field == "channel"


class TestSms:
    def test_default_review_request(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST, Channel.SMS, _review_fields()
        )

        assert message.subject is None
        assert message.content_type == ContentType.TEXT
        assert message.body == (
            "Hi Jane, thank you for choosing Acme! We'd love to hear your "
            "feedback. Please share your experience here: https://g.co/r"
        )

    def test_sms_is_not_html_escaped(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST,
            Channel.SMS,
            _review_fields(business_name="Ben & Jerry's"),
        )

        assert "Ben & Jerry's" in message.body

    def test_custom_template_keeps_unknown_placeholders(
        self, renderer: TemplateRenderer
    ) -> None:
        message = renderer.render(
            NotificationKind.REVIEW_REQUEST,
            Channel.SMS,
            _review_fields(message_template="Hey {{customerName}}, {{foo}}"),
        )

        assert message.body == "Hey Jane, {{foo}}"

    def test_test_kind_fixed_body(self, renderer: TemplateRenderer) -> None:
        message = renderer.render(NotificationKind.TEST, Channel.SMS, MessageFields())

        assert message.body.startswith("This is a test message from RevBoost.")


class TestSubstitutePlaceholders:
    def test_replaces_every_occurrence(self) -> None:
        result = substitute_placeholders(
            "{{customerName}} / {{customerName}}",
            customer_name="Jane",
            business_name="Acme",
            review_link="https://g.co/r",
        )

        assert result == "Jane / Jane"

    def test_substituted_values_are_not_expanded(self) -> None:
        result = substitute_placeholders(
            "{{customerName}} at {{businessName}}",
            customer_name="{{businessName}}",
            business_name="Acme",
            review_link="https://g.co/r",
        )

        assert result == "{{businessName}} at Acme"

    def test_spaced_placeholders_are_not_recognized(self) -> None:
        result = substitute_placeholders(
            "{{ customerName }}",
            customer_name="Jane",
            business_name="Acme",
            review_link="https://g.co/r",
        )

        assert result == "{{ customerName }}"


class TestStarRating:
    @pytest.mark.parametrize(
        ("rating", "expected"),
        [(1, "★☆☆☆☆"), (3, "★★★☆☆"), (5, "★★★★★")],
    )
    def test_glyphs(self, rating: int, expected: str) -> None:
        assert star_rating(rating) == expected
