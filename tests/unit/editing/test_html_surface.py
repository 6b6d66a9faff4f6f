"""Unit tests for HtmlSurface selections and formatting commands."""

from src.editing.html_surface import HtmlSurface


class TestSelection:
    """Test cases for select."""

    def test_select_existing_text(self):
        surface = HtmlSurface("<p>Find your next home</p>")

        assert surface.select("next home")
        assert surface.selected_text == "next home"

    def test_select_missing_text(self):
        surface = HtmlSurface("<p>Find your next home</p>")

        assert not surface.select("office")
        assert surface.selected_text == ""

    def test_select_nth_occurrence_across_text_nodes(self):
        surface = HtmlSurface("<p>home</p><p>home sweet home</p>")

        assert surface.select("home", occurrence=2)
        surface.exec_command("italic")

        assert surface.inner_html == "<p>home</p><p>home sweet <i>home</i></p>"

    def test_set_html_clears_selection(self):
        surface = HtmlSurface("<p>abc</p>")
        surface.select("b")

        surface.set_html("<p>xyz</p>")

        assert surface.selected_text == ""


class TestExecCommand:
    """Test cases for exec_command."""

    def test_bold_wraps_selection(self):
        surface = HtmlSurface("<p>Find your next home</p>")
        surface.select("next home")

        assert surface.exec_command("bold")
        assert surface.inner_html == "<p>Find your <b>next home</b></p>"

    def test_create_link_wraps_selection(self):
        surface = HtmlSurface("<p>Call us today</p>")
        surface.select("Call us")

        assert surface.exec_command("createLink", "tel:+911234567890")
        assert surface.inner_html == '<p><a href="tel:+911234567890">Call us</a> today</p>'

    def test_create_link_without_url_is_noop(self):
        surface = HtmlSurface("<p>Call us</p>")
        surface.select("Call")

        assert not surface.exec_command("createLink", "")
        assert surface.inner_html == "<p>Call us</p>"

    def test_unlink_removes_enclosing_anchor(self):
        surface = HtmlSurface('<p><a href="https://x.com">site</a> link</p>')
        surface.select("site")

        assert surface.exec_command("unlink")
        assert surface.inner_html == "<p>site link</p>"

    def test_unlink_outside_link_is_noop(self):
        surface = HtmlSurface("<p>plain</p>")
        surface.select("plain")

        assert not surface.exec_command("unlink")

    def test_commands_keep_selection_on_formatted_text(self):
        """A second command applies to the text the first one wrapped."""
        surface = HtmlSurface("<p>Find your next home</p>")
        surface.select("home")
        surface.exec_command("bold")
        surface.exec_command("italic")

        assert surface.inner_html == "<p>Find your next <b><i>home</i></b></p>"

    def test_unsupported_command_returns_false(self):
        surface = HtmlSurface("<p>abc</p>")
        surface.select("abc")

        assert not surface.exec_command("insertImage", "x.png")

    def test_command_without_selection_returns_false(self):
        surface = HtmlSurface("<p>abc</p>")

        assert not surface.exec_command("bold")
        assert surface.inner_html == "<p>abc</p>"
