"""Shared form trees for the starform test suite."""

from types import SimpleNamespace

import pytest

from starform.dom import Fieldset, Form, Input, Textarea


def build_login_form():
    email = Input(name="email", type="email")
    password = Input(name="password", type="password")
    submit = Input(type="submit")
    node = Form(Fieldset(email, password, name="account"), submit)
    return SimpleNamespace(node=node, email=email, password=password, submit=submit)


def build_signup_form():
    email = Input(name="email", type="email")
    password = Input(name="password", type="password")
    show_password = Input(name="showPassword", type="checkbox")
    confirm_password = Input(name="confirmPassword", type="password")
    public_yes = Input(name="publicEmail", value="yes", type="radio")
    public_no = Input(name="publicEmail", value="no", type="radio")
    first_name = Input(name="firstName")
    last_name = Input(name="lastName")
    bio = Textarea(name="bio")
    picture = Input(name="profile.picture", type="file")
    extra_pictures = Input(name="extra.pictures", type="file", multiple=True)
    tech = Input(type="checkbox", name="preferences", value="technology")
    films = Input(type="checkbox", name="preferences", value="films")
    submit = Input(type="submit")
    node = Form(
        Fieldset(
            email, password, show_password, public_yes, public_no, confirm_password,
            name="account",
        ),
        Fieldset(first_name, last_name, bio, name="profile"),
        picture,
        extra_pictures,
        tech,
        films,
        submit,
    )
    return SimpleNamespace(
        node=node, email=email, password=password, show_password=show_password,
        confirm_password=confirm_password, public_yes=public_yes, public_no=public_no,
        first_name=first_name, last_name=last_name, bio=bio, picture=picture,
        extra_pictures=extra_pictures, tech=tech, films=films, submit=submit,
    )


@pytest.fixture
def login_form():
    return build_login_form()


@pytest.fixture
def signup_form():
    return build_signup_form()


class Recorder:
    """Callable that records the arguments of each call."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args):
        self.calls.append(args)
        return self.result

    @property
    def called(self) -> bool:
        return bool(self.calls)


class AsyncRecorder(Recorder):
    async def __call__(self, *args):
        self.calls.append(args)
        return self.result


@pytest.fixture
def on_submit():
    return AsyncRecorder()
