import reflex as rx

from vending.pages.login import login_page
from vending.vending import index


def test_login_page_builds():
    assert isinstance(login_page(), rx.Component)


def test_index_builds_every_page():
    component = index()

    assert isinstance(component, rx.Component)
    assert isinstance(component.render(), dict)
