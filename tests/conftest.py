import os

os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-for-vending-suite-0123456789")

import pytest

from vending.schemas.vending_schemas import Lugar, Maquina
from vending.services.lugar_service import LugarService
from vending.services.maquina_service import MaquinaService
from vending.utils import kv as kv_module
from vending.utils import rate_limit
from vending.utils.kv import MemoryKV

USER_ID = "user-1"


@pytest.fixture(autouse=True)
def memory_store(monkeypatch):
    """Cada test usa un almacén en memoria limpio y sin Redis."""
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("KV_URL", raising=False)
    monkeypatch.delenv("NEYNAR_API_KEY", raising=False)
    monkeypatch.setattr(rate_limit, "get_redis_client", lambda: None)
    rate_limit._memory_store.clear()
    store = MemoryKV()
    kv_module.set_kv(store)
    yield store
    kv_module.reset_kv()
    rate_limit._memory_store.clear()


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def lugar_sample(user_id):
    return LugarService.save_lugar(
        user_id,
        Lugar(nombre="Plaza Norte", direccion="Av. Principal 123"),
    )


@pytest.fixture
def chiclera_sample(user_id, lugar_sample):
    return MaquinaService.create_maquina(
        user_id,
        Maquina(
            nombre="Chiclera Entrada",
            tipo="chiclera",
            tipo_chiclera="doble",
            lugar_id=lugar_sample.id,
            fecha_instalacion="2024-01-01T00:00:00.000Z",
        ),
    )


@pytest.fixture
def peluchera_sample(user_id, lugar_sample):
    return MaquinaService.create_maquina(
        user_id,
        Maquina(
            nombre="Peluchera Grande",
            tipo="peluchera",
            lugar_id=lugar_sample.id,
            fecha_instalacion="2024-01-01T00:00:00.000Z",
        ),
    )
