"""Tests for control classification, number parsing and value conversion."""

import math

import pytest

from starform.codec import (
    ControlIndex,
    ControlKind,
    classify,
    format_number,
    parse_number,
    read_value,
    write_value,
)
from starform.dom import Button, Div, Fieldset, Form, Input, Select, Textarea
from starform.paths import get_path, has_errors, set_path, split_name


class TestClassify:

    @pytest.mark.parametrize("type", ["text", "email", "password", "number", "range", "file", "hidden", "date"])
    def test_text_like_inputs(self, type):
        assert classify(Input(name="f", type=type)) is ControlKind.TEXT_LIKE

    def test_textarea_is_text_like(self):
        assert classify(Textarea(name="bio")) is ControlKind.TEXT_LIKE

    def test_checkbox_and_radio(self):
        assert classify(Input(type="checkbox")) is ControlKind.CHECKBOX
        assert classify(Input(type="radio")) is ControlKind.RADIO

    @pytest.mark.parametrize("el", [Input(type="submit"), Input(type="reset"), Button(), Select(), Div()])
    def test_unsupported(self, el):
        assert classify(el) is ControlKind.UNSUPPORTED


class TestNumbers:

    def test_parse(self):
        assert parse_number("42") == 42
        assert parse_number(" 1.5 ") == 1.5
        assert parse_number("") == 0

    def test_unparsable_is_nan(self):
        assert math.isnan(parse_number("12abc"))

    def test_format(self):
        assert format_number(3.0) == "3"
        assert format_number(2.5) == "2.5"
        assert format_number(math.nan) == ""
        assert format_number(None) == ""


class TestPaths:

    def test_split_name(self):
        assert split_name("profile.picture") == ("profile", "picture")
        assert split_name("email") == ("email",)

    def test_set_path_copies_along_path(self):
        original = {"account": {"email": ""}, "other": {"x": 1}}
        updated = set_path(original, ("account", "email"), "a@b.com")
        assert updated == {"account": {"email": "a@b.com"}, "other": {"x": 1}}
        assert original["account"]["email"] == ""
        assert updated["other"] is original["other"]

    def test_get_path_default(self):
        assert get_path({"a": {"b": 1}}, ("a", "c"), "none") == "none"
        assert get_path({"a": "leaf"}, ("a", "b")) is None

    def test_has_errors_scans_nested_leaves(self):
        assert not has_errors({})
        assert not has_errors({"account": {"email": "", "password": None}})
        assert has_errors({"account": {"email": "Not email"}})
        assert has_errors({"tags": ["", "Too short"]})


class TestControlIndex:

    def test_paths_include_named_fieldsets(self, login_form):
        index = ControlIndex(login_form.node)
        assert index.names() == ["email", "password"]
        assert index.path("email") == ("account", "email")

    def test_unnamed_and_unsupported_controls_skipped(self):
        node = Form(Input(type="text"), Input(name="go", type="submit"), Input(name="kept"))
        index = ControlIndex(node)
        assert index.names() == ["kept"]

    def test_groups_keep_tree_order(self, signup_form):
        index = ControlIndex(signup_form.node)
        assert index.controls("preferences") == [signup_form.tech, signup_form.films]
        assert index.path("profile.picture") == ("profile", "picture")

    def test_nested_fieldsets(self):
        node = Form(Fieldset(Fieldset(Input(name="city"), name="address"), name="user"))
        assert ControlIndex(node).path("city") == ("user", "address", "city")


class TestReadWrite:

    def test_lone_checkbox_is_boolean(self):
        box = Input(name="agree", type="checkbox", checked=True)
        index = ControlIndex(Form(box))
        assert read_value(box, index) is True

    def test_checkbox_group_is_list_of_checked_values(self, signup_form):
        index = ControlIndex(signup_form.node)
        signup_form.films.checked = True
        assert read_value(signup_form.tech, index) == ["films"]

    def test_radio_group(self, signup_form):
        index = ControlIndex(signup_form.node)
        assert read_value(signup_form.public_no, index) is None
        signup_form.public_no.checked = True
        assert read_value(signup_form.public_yes, index) == "no"

    def test_file_inputs(self, signup_form):
        assert read_value(signup_form.picture, None) is None
        signup_form.extra_pictures.files = ["a.png", "b.png"]
        assert read_value(signup_form.extra_pictures, None) == ["a.png", "b.png"]

    def test_number_input(self):
        age = Input(name="age", type="number", value="31")
        assert read_value(age, None) == 31

    def test_write_back(self, signup_form):
        index = ControlIndex(signup_form.node)
        write_value("preferences", ["films"], index)
        write_value("publicEmail", "yes", index)
        write_value("showPassword", True, index)
        write_value("email", "x@y.z", index)
        assert not signup_form.tech.checked and signup_form.films.checked
        assert signup_form.public_yes.checked and not signup_form.public_no.checked
        assert signup_form.show_password.checked
        assert signup_form.email.value == "x@y.z"

    def test_write_back_number_and_missing_name(self):
        age = Input(name="age", type="number")
        index = ControlIndex(Form(age))
        write_value("age", 12.0, index)
        write_value("unknown", "ignored", index)
        assert age.value == "12"
