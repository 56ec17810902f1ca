import os

from dotenv import load_dotenv
import reflex as rx

load_dotenv()


config = rx.Config(
    app_name="vending",
    api_url=os.getenv("API_URL", "http://localhost:8000"),
    plugins=[rx.plugins.TailwindV3Plugin()],
    disable_plugins=["reflex.plugins.sitemap.SitemapPlugin"],
    telemetry_enabled=False,
    theme=rx.theme(
        has_background=True,
        radius="medium",
        spacing="relaxed",
        transitions="gentle",
    ),
)
