"""
Tests for notification template rendering.
"""

import pytest
from unittest.mock import patch, mock_open
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.errors import RenderError
from domain.models import BodyFormat, Submission
from services import template


@pytest.fixture(autouse=True)
def clear_template_cache():
    template.clear_cache()
    yield
    template.clear_cache()


@pytest.fixture
def submission():
    return Submission(
        name="Jane",
        email="jane@x.com",
        telephone="555",
        detail="hello",
        verification_token="secret-token-value"
    )


class TestLoadTemplate:
    """Test loading templates from the templates directory."""

    def test_load_packaged_templates(self):
        html_template = template.load_template('notification.html')
        text_template = template.load_template('notification.txt')

        for placeholder in ('{name}', '{email}', '{telephone}', '{detail}'):
            assert placeholder in html_template
            assert placeholder in text_template

    def test_template_is_cached(self):
        with patch('builtins.open', new_callable=mock_open, read_data='Hi {name}') as mock_file:
            first = template.load_template('cached.html')
            second = template.load_template('cached.html')

        assert first == second == 'Hi {name}'
        mock_file.assert_called_once()

    def test_missing_template(self):
        with pytest.raises(RenderError, match="not found"):
            template.load_template('missing.html')


class TestFillTemplate:
    """Test placeholder substitution."""

    def test_html_escaping(self):
        result = template.fill_template("<p>{name}</p>", True, name='<script>alert("x")</script>')

        assert result == "<p>&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;</p>"

    def test_text_is_not_html_escaped(self):
        result = template.fill_template("Name: {name}", False, name="A & B <c>")

        assert result == "Name: A & B <c>"

    def test_braces_in_values_are_literal(self):
        """Test that values cannot act as format fields."""
        result = template.fill_template("{name}: {detail}", False, name="Jane", detail="{name} {0}")

        assert result == "Jane: {name} {0}"

    def test_missing_variable(self):
        with pytest.raises(RenderError, match="Missing required variable in template: detail"):
            template.fill_template("{name} {detail}", True, name="Jane")

    def test_malformed_template(self):
        with pytest.raises(RenderError, match="Malformed template"):
            template.fill_template("{name", True, name="Jane")


class TestRenderBody:
    """Test rendering the notification body."""

    def test_html_body_contains_fields(self, submission):
        body = template.render_body(submission, BodyFormat.HTML)

        assert "Jane" in body
        assert "jane@x.com" in body
        assert "555" in body
        assert "hello" in body

    def test_token_never_rendered(self, submission):
        for body_format in BodyFormat:
            body = template.render_body(submission, body_format)
            assert "secret-token-value" not in body

    def test_markup_in_name_is_escaped(self):
        submission = Submission(
            name="Ä&<b>",
            email="a@b.com",
            telephone="123",
            detail="hi",
            verification_token="tok"
        )

        body = template.render_body(submission, BodyFormat.HTML)

        assert "Ä&amp;&lt;b&gt;" in body
        assert "<b>" not in body
        assert "a@b.com" in body

    def test_text_body(self, submission):
        body = template.render_body(submission, BodyFormat.TEXT)

        assert "Name: Jane" in body
        assert "Telephone: 555" in body
        assert "<html" not in body

    def test_braces_in_detail_are_kept(self):
        submission = Submission(
            name="Jane",
            email="jane@x.com",
            telephone="555",
            detail="price {100} for {name}",
            verification_token="tok"
        )

        for body_format in BodyFormat:
            body = template.render_body(submission, body_format)
            assert "price {100} for {name}" in body
            assert "{{" not in body


class TestRenderSubject:
    """Test rendering the subject line."""

    def test_subject(self, submission):
        subject = template.render_subject(submission, "Contact form submission from {name}")

        assert subject == "Contact form submission from Jane"

    def test_subject_is_single_line(self):
        submission = Submission(
            name="Jane\r\nBcc: someone@example.com",
            email="jane@x.com",
            telephone="555",
            detail="hello",
            verification_token="tok"
        )

        subject = template.render_subject(submission, "From {name}")

        assert "\n" not in subject
        assert "\r" not in subject
        assert subject == "From Jane Bcc: someone@example.com"

    def test_braces_in_name_are_kept(self):
        submission = Submission(
            name="Jo {x}",
            email="jo@x.com",
            telephone="555",
            detail="hello",
            verification_token="tok"
        )

        subject = template.render_subject(submission, "From {name}")

        assert subject == "From Jo {x}"
