import reflex as rx

from vending.services.auth_service import AuthService
from vending.services.errors import ServiceError
from vending.utils.auth import verify_token
from vending.utils.logger import get_logger
from .mixin_state import MixinState
from .types import CurrentUser

logger = get_logger("AuthState")


class AuthState(MixinState):
    token: str = rx.LocalStorage("")
    error_message: str = ""
    auth_mode: str = "login"

    @rx.var
    def is_authenticated(self) -> bool:
        return bool(verify_token(self.token))

    @rx.var
    def current_user_id(self) -> str:
        return verify_token(self.token) or ""

    @rx.var
    def current_user(self) -> CurrentUser:
        user_id = verify_token(self.token)
        if not user_id:
            return self._guest_user()
        usuario = AuthService.get_usuario_by_id(user_id)
        if usuario is None:
            return self._guest_user()
        return {"id": usuario.id, "email": usuario.email, "nombre": usuario.nombre}

    def _guest_user(self) -> CurrentUser:
        return {"id": "", "email": "", "nombre": "Invitado"}

    @rx.event
    def set_auth_mode(self, mode: str):
        self.auth_mode = "signup" if mode == "signup" else "login"
        self.error_message = ""

    @rx.event
    def login(self, form_data: dict):
        try:
            _, token = AuthService.login(
                form_data.get("email", ""), form_data.get("password", "")
            )
        except ServiceError as exc:
            self.error_message = str(exc)
            return
        self.token = token
        self.error_message = ""
        return rx.redirect("/")

    @rx.event
    def signup(self, form_data: dict):
        password = form_data.get("password", "")
        if password != form_data.get("confirm_password", password):
            self.error_message = "Las contraseñas no coinciden"
            return
        try:
            _, token = AuthService.signup(
                form_data.get("email", ""), password, form_data.get("nombre")
            )
        except ServiceError as exc:
            self.error_message = str(exc)
            return
        self.token = token
        self.error_message = ""
        self.auth_mode = "login"
        return rx.toast("Cuenta creada correctamente.", duration=3000)

    @rx.event
    def logout(self):
        self.token = ""
        self.error_message = ""
        return rx.redirect("/")
