"""Unit tests for cli.edit_command module."""

import base64
from unittest.mock import MagicMock, Mock

import pytest

from src.cli.edit_command import EditCommand, parse_assignment
from src.cli.errors import EditArgumentError
from src.cli.models import EditorConfig, ExitCode
from src.cms_client.errors import APIAccessError, InvalidCredentialsError
from src.cms_client.query_cache import page_query_key
from src.models.compression_result import CompressionResult, ImageFile
from tests.fixtures.sample_images import make_image_bytes


@pytest.fixture
def admin_auth():
    auth = Mock()
    auth.is_admin.return_value = True
    return auth


@pytest.fixture
def output():
    # MagicMock so spinner() works as a context manager
    return MagicMock()


@pytest.fixture
def command(fake_api, cache, admin_auth, output):
    return EditCommand(
        config=EditorConfig(),
        output_handler=output,
        authenticator=admin_auth,
        api=fake_api,
        cache=cache,
    )


class TestParseAssignment:
    """Test cases for parse_assignment."""

    def test_simple(self):
        assert parse_assignment("homepage.heroTitle=Welcome Home") == ("homepage", "heroTitle", "Welcome Home")

    def test_value_may_contain_equals(self):
        assert parse_assignment("about.body=<a href=\"/x\">x</a>") == ("about", "body", "<a href=\"/x\">x</a>")

    def test_field_key_may_contain_dots(self):
        assert parse_assignment("homepage.seo.title=Hi") == ("homepage", "seo.title", "Hi")

    def test_empty_value_allowed(self):
        assert parse_assignment("homepage.stat2=") == ("homepage", "stat2", "")

    @pytest.mark.parametrize("argument", [
        "homepage.heroTitle",
        "heroTitle=Hi",
        ".heroTitle=Hi",
        "home page.heroTitle=Hi",
        "homepage.=Hi",
    ])
    def test_malformed(self, argument):
        with pytest.raises(EditArgumentError):
            parse_assignment(argument)


class TestEditCommandText:
    """Test cases for text edits."""

    def test_saves_merged_content(self, command, fake_api):
        exit_code = command.run(["homepage.heroTitle=Welcome Home", "homepage.stat1=99,999+ Listings"])

        assert exit_code == ExitCode.SUCCESS
        updates = fake_api.calls_to('update_page', 'homepage')
        assert len(updates) == 1
        content = updates[0]['content']
        assert content['heroTitle'] == "Welcome Home"
        assert content['stat1'] == "99,999+ Listings"
        assert content['heroSubtitle'] == "Rentals without brokerage"
        assert updates[0]['title'] == "Homepage"

    def test_html_is_sanitized_before_saving(self, command, fake_api):
        command.run(['about.body=<p onclick="x()">Hi <script>alert(1)</script><b>there</b></p>'])

        assert fake_api.pages['about'].content['body'] == "<p>Hi <b>there</b></p>"

    def test_unchanged_value_is_not_saved(self, command, fake_api, output):
        exit_code = command.run(["homepage.heroTitle=Find Your Home"])

        assert exit_code == ExitCode.SUCCESS
        assert fake_api.calls_to('update_page') == []
        output.print_save_summary.assert_called_once_with([])

    def test_new_page_is_created(self, command, fake_api):
        assert command.run(["faq.question1=How do I list a flat?"]) == ExitCode.SUCCESS

        assert fake_api.pages['faq'].content == {"question1": "How do I list a flat?"}
        assert fake_api.pages['faq'].title == "Faq"

    def test_cache_is_invalidated_after_save(self, command, cache):
        command.run(["homepage.heroTitle=Welcome Home"])

        assert page_query_key("homepage") not in cache

    def test_success_is_reported(self, command, output):
        command.run(["homepage.heroTitle=Welcome Home", "about.title=About Us"])

        notification = output.notify.call_args.args[0]
        assert notification.title == "Changes saved"
        assert notification.description == "Saved Homepage, About"
        output.print_save_summary.assert_called_once_with(["homepage", "about"], pending_count=0)


class TestEditCommandImages:
    """Test cases for image edits."""

    def test_image_url(self, command, fake_api):
        exit_code = command.run([], ["homepage.heroImage=https://cdn.example.com/new.jpg"])

        assert exit_code == ExitCode.SUCCESS
        assert fake_api.pages['homepage'].content['heroImage'] == "https://cdn.example.com/new.jpg"

    def test_image_file_is_compressed_and_embedded(self, command, fake_api, tmp_path):
        path = tmp_path / "hero.jpg"
        path.write_bytes(make_image_bytes(2400, 1200))

        exit_code = command.run([], [f"homepage.heroImage={path}"])

        assert exit_code == ExitCode.SUCCESS
        assert fake_api.pages['homepage'].content['heroImage'].startswith("data:image/jpeg;base64,")

    def test_uses_configured_limits(self, fake_api, cache, admin_auth, output, tmp_path):
        path = tmp_path / "hero.png"
        path.write_bytes(b"png-bytes")
        compressed = ImageFile("hero.png", b"small", "image/png")
        compressor = Mock(return_value=CompressionResult(compressed, 9, 5, 44))
        command = EditCommand(
            config=EditorConfig(image_max_size_mb=0.5, image_max_dimension=800),
            output_handler=output,
            authenticator=admin_auth,
            api=fake_api,
            cache=cache,
            compressor=compressor,
        )

        assert command.run([], [f"about.photo={path}"]) == ExitCode.SUCCESS

        assert compressor.call_args.kwargs == {'max_size_mb': 0.5, 'max_width_or_height': 800}
        expected = "data:image/png;base64," + base64.b64encode(b"small").decode("ascii")
        assert fake_api.pages['about'].content['photo'] == expected

    def test_missing_file(self, command, fake_api, tmp_path):
        exit_code = command.run([], [f"homepage.heroImage={tmp_path / 'missing.jpg'}"])

        assert exit_code == ExitCode.GENERAL_ERROR
        assert fake_api.calls_to('update_page') == []

    def test_not_an_image(self, command, output, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")

        assert command.run([], [f"homepage.heroImage={path}"]) == ExitCode.GENERAL_ERROR
        assert "Not an image file" in output.error.call_args.args[0]


class TestEditCommandErrors:
    """Test cases for error handling."""

    def test_nothing_to_edit(self, command, output, fake_api):
        assert command.run([]) == ExitCode.SUCCESS
        output.warning.assert_called_once_with("Nothing to edit")
        assert fake_api.calls == []

    def test_bad_assignment(self, command, fake_api):
        assert command.run(["heroTitle=Hi"]) == ExitCode.GENERAL_ERROR
        assert fake_api.calls == []

    def test_non_admin(self, command, admin_auth, fake_api):
        admin_auth.is_admin.return_value = False

        assert command.run(["homepage.heroTitle=Hi"]) == ExitCode.AUTH_ERROR
        assert fake_api.calls == []

    def test_partial_failure(self, command, fake_api, output):
        fake_api.fail_updates['about'] = APIAccessError("Pages API failure (HTTP 500)")

        exit_code = command.run(["homepage.heroTitle=Welcome Home", "about.title=About Us"])

        assert exit_code == ExitCode.SAVE_FAILED
        assert fake_api.pages['homepage'].content['heroTitle'] == "Welcome Home"
        assert fake_api.pages['about'].content['title'] == "About"
        notification = output.notify.call_args.args[0]
        assert notification.is_destructive
        assert notification.description == "Could not save About (Homepage saved)"
        output.print_save_summary.assert_called_once_with(["homepage"], pending_count=1)

    def test_auth_error_while_reading(self, command, fake_api, output):
        fake_api.fail_reads['homepage'] = InvalidCredentialsError("https://rentals.example.com")

        assert command.run(["homepage.heroTitle=Hi"]) == ExitCode.AUTH_ERROR
        output.info.assert_any_call("Check CMS_URL and CMS_API_TOKEN environment variables")
