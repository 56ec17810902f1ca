import reflex as rx

from vending.services.auth_service import AuthService
from vending.states.auth_state import AuthState
from vending.utils.auth import verify_token


def _state():
    state = AuthState()
    state.token = ""
    state.error_message = ""
    state.auth_mode = "login"
    return state


def test_login_sets_token_and_redirects(monkeypatch):
    usuario, _ = AuthService.signup("ana@test.com", "secreta1")
    state = _state()
    monkeypatch.setattr(rx, "redirect", lambda path: f"redirect:{path}")

    result = state.login({"email": "ana@test.com", "password": "secreta1"})

    assert result == "redirect:/"
    assert verify_token(state.token) == usuario.id
    assert state.error_message == ""


def test_login_wrong_password_sets_error():
    AuthService.signup("ana@test.com", "secreta1")
    state = _state()

    state.login({"email": "ana@test.com", "password": "mala"})

    assert state.token == ""
    assert state.error_message == "Email o contraseña incorrectos"


def test_signup_password_mismatch():
    state = _state()

    state.signup({"email": "ana@test.com", "password": "secreta1", "confirm_password": "otra"})

    assert state.error_message == "Las contraseñas no coinciden"
    assert AuthService.get_usuario("ana@test.com") is None


def test_signup_creates_account(monkeypatch):
    state = _state()
    monkeypatch.setattr(rx, "toast", lambda *args, **kwargs: "toast")

    result = state.signup(
        {
            "email": "ana@test.com",
            "password": "secreta1",
            "confirm_password": "secreta1",
            "nombre": "Ana",
        }
    )

    assert result == "toast"
    assert AuthService.get_usuario("ana@test.com").nombre == "Ana"
    assert state.token


def test_set_auth_mode_clears_error():
    state = _state()
    state.error_message = "error previo"

    state.set_auth_mode("signup")

    assert state.auth_mode == "signup"
    assert state.error_message == ""


def test_logout(monkeypatch):
    state = _state()
    state.token = "algo"
    monkeypatch.setattr(rx, "redirect", lambda path: path)

    assert state.logout() == "/"
    assert state.token == ""
