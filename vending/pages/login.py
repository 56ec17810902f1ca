import reflex as rx

from vending.state import State

INPUT_CLASS = "mt-1 block w-full px-3 py-2 bg-white border border-gray-300 rounded-md shadow-sm placeholder-gray-400 focus:outline-none focus:ring-indigo-500 focus:border-indigo-500 sm:text-sm"


def _field(label: str, name: str, placeholder: str, input_type: str = "text") -> rx.Component:
    return rx.el.div(
        rx.el.label(label, class_name="block text-sm font-medium text-gray-700"),
        rx.el.input(
            placeholder=placeholder,
            name=name,
            type=input_type,
            class_name=INPUT_CLASS,
        ),
        class_name="mb-4",
    )


def _submit(text: str) -> rx.Component:
    return rx.el.button(
        text,
        type="submit",
        class_name="w-full flex justify-center py-2 px-4 border border-transparent rounded-md shadow-sm text-sm font-medium text-white bg-indigo-600 hover:bg-indigo-700 focus:outline-none focus:ring-2 focus:ring-offset-2 focus:ring-indigo-500 min-h-[44px] mt-2",
    )


def login_form() -> rx.Component:
    return rx.el.form(
        _field("Email", "email", "tu@email.com", "email"),
        _field("Contraseña", "password", "••••••••", "password"),
        _submit("Iniciar Sesión"),
        on_submit=State.login,
        reset_on_submit=False,
    )


def signup_form() -> rx.Component:
    return rx.el.form(
        _field("Nombre", "nombre", "Tu nombre"),
        _field("Email", "email", "tu@email.com", "email"),
        _field("Contraseña", "password", "Mínimo 6 caracteres", "password"),
        _field("Confirmar contraseña", "confirm_password", "••••••••", "password"),
        _submit("Crear cuenta"),
        on_submit=State.signup,
        reset_on_submit=False,
    )


def login_page() -> rx.Component:
    return rx.el.div(
        rx.el.div(
            rx.el.div(
                rx.icon("joystick", class_name="h-10 w-10 text-indigo-600"),
                rx.el.h1("Gestión Vending", class_name="text-3xl font-bold text-gray-800"),
                class_name="flex items-center justify-center gap-3 mb-8",
            ),
            rx.cond(State.auth_mode == "signup", signup_form(), login_form()),
            rx.cond(
                State.error_message != "",
                rx.el.div(
                    rx.icon("triangle-alert", class_name="h-5 w-5 text-red-500"),
                    rx.el.p(State.error_message, class_name="text-sm text-red-700"),
                    class_name="flex items-center gap-2 mt-4 bg-red-100 p-3 rounded-md border border-red-200",
                ),
            ),
            rx.el.div(
                rx.cond(
                    State.auth_mode == "signup",
                    rx.el.button(
                        "¿Ya tienes cuenta? Inicia sesión",
                        on_click=State.set_auth_mode("login"),
                        class_name="text-sm text-indigo-600 hover:underline",
                    ),
                    rx.el.button(
                        "¿No tienes cuenta? Regístrate",
                        on_click=State.set_auth_mode("signup"),
                        class_name="text-sm text-indigo-600 hover:underline",
                    ),
                ),
                class_name="flex justify-center mt-6",
            ),
            class_name="w-full max-w-md p-6 sm:p-8 bg-white rounded-2xl shadow-lg border",
        ),
        class_name="flex items-center justify-center min-h-screen bg-gray-100 px-4",
    )
