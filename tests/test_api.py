import pytest
from fastapi.testclient import TestClient

from vending.api import create_api
from vending.utils.auth import create_access_token


@pytest.fixture
def client():
    return TestClient(create_api())


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def _crear_lugar(client, headers, nombre="Plaza Norte"):
    response = client.post(
        "/api/lugares",
        json={"nombre": nombre, "direccion": "Av. Principal 123"},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()["lugar"]


def _crear_maquina(client, headers, lugar_id, **extra):
    body = {
        "nombre": "Chiclera Entrada",
        "tipo": "chiclera",
        "tipoChiclera": "doble",
        "lugarId": lugar_id,
        "fechaInstalacion": "2024-01-01T00:00:00.000Z",
    }
    body.update(extra)
    response = client.post("/api/maquinas", json=body, headers=headers)
    assert response.status_code == 200
    return response.json()["maquina"]


class TestAuthentication:
    @pytest.mark.parametrize(
        "path", ["/api/lugares", "/api/maquinas", "/api/recolecciones", "/api/costos", "/api/rentabilidad"]
    )
    def test_requires_bearer_token(self, client, path):
        response = client.get(path)

        assert response.status_code == 401
        assert response.json() == {"error": "Usuario no autenticado"}

    def test_user_id_header_is_ignored(self, client):
        response = client.get("/api/lugares", headers={"X-User-Id": "user-1"})
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/lugares", headers={"Authorization": "Bearer basura"})
        assert response.status_code == 401


class TestLugaresApi:
    def test_create_and_list(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)

        response = client.get("/api/lugares", headers=auth_headers)

        assert lugar["id"].startswith("lugar-")
        assert "fechaCreacion" in lugar
        assert response.json()["lugares"] == [lugar]

    def test_invalid_body_returns_details(self, client, auth_headers):
        response = client.post("/api/lugares", json={"nombre": "Sin dirección"}, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Datos inválidos"
        assert body["details"]

    def test_update_requires_lugar(self, client, auth_headers):
        response = client.put("/api/lugares", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Lugar es requerido"

    def test_update(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        lugar["nombre"] = "Plaza Sur"

        response = client.put("/api/lugares", json={"lugar": lugar}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["lugar"]["nombre"] == "Plaza Sur"

    def test_update_unknown_is_404(self, client, auth_headers):
        response = client.put(
            "/api/lugares",
            json={"lugar": {"id": "lugar-x", "nombre": "X", "direccion": "Y"}},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_delete_requires_id(self, client, auth_headers):
        response = client.delete("/api/lugares", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "lugarId es requerido"

    def test_delete_in_use_is_409(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        _crear_maquina(client, auth_headers, lugar["id"])

        response = client.delete(f"/api/lugares?lugarId={lugar['id']}", headers=auth_headers)

        assert response.status_code == 409

    def test_delete(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)

        response = client.delete(f"/api/lugares?lugarId={lugar['id']}", headers=auth_headers)

        assert response.json() == {"success": True}
        assert client.get("/api/lugares", headers=auth_headers).json()["lugares"] == []


class TestMaquinasApi:
    def test_create_with_default_compartments(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)

        maquina = _crear_maquina(client, auth_headers, lugar["id"])

        assert len(maquina["compartimentos"]) == 2
        assert maquina["compartimentos"][0]["capacidad"] == 200
        assert maquina["activa"] is True

    def test_create_with_unknown_lugar(self, client, auth_headers):
        response = client.post(
            "/api/maquinas",
            json={
                "nombre": "Peluchera",
                "tipo": "peluchera",
                "lugarId": "lugar-x",
                "fechaInstalacion": "2024-01-01",
            },
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_invalid_tipo(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        response = client.post(
            "/api/maquinas",
            json={
                "nombre": "X",
                "tipo": "cafetera",
                "lugarId": lugar["id"],
                "fechaInstalacion": "2024-01-01",
            },
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_update_requires_maquina(self, client, auth_headers):
        response = client.put("/api/maquinas", json={"maquina": None}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Máquina es requerida"

    def test_delete_cascade_count(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        maquina = _crear_maquina(client, auth_headers, lugar["id"])
        client.post(
            "/api/recolecciones",
            json={"maquinaId": maquina["id"], "ingresos": 10},
            headers=auth_headers,
        )

        response = client.delete(f"/api/maquinas?maquinaId={maquina['id']}", headers=auth_headers)

        assert response.json() == {"success": True, "recoleccionesEliminadas": 1}

    def test_other_user_cannot_see_machines(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        _crear_maquina(client, auth_headers, lugar["id"])
        otro = {"Authorization": f"Bearer {create_access_token('user-2')}"}

        assert client.get("/api/maquinas", headers=otro).json()["maquinas"] == []


class TestRecoleccionesYRentabilidad:
    def test_collection_flow(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        maquina = _crear_maquina(client, auth_headers, lugar["id"])
        comp = maquina["compartimentos"][0]["id"]

        response = client.post(
            "/api/recolecciones",
            json={
                "maquinaId": maquina["id"],
                "fecha": "2024-03-10T12:00:00.000Z",
                "ingresos": 100,
                "comisionLocal": 10,
                "productosVendidos": [{"compartimentoId": comp, "cantidad": 20}],
                "costos": [{"concepto": "Gasolina", "monto": 5}],
                "rellenos": [{"compartimentoId": comp, "cantidad": 50}],
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        recoleccion = response.json()["recoleccion"]
        assert recoleccion["ingresosNetos"] == pytest.approx(90.0)

        listado = client.get(
            f"/api/recolecciones?maquinaId={maquina['id']}", headers=auth_headers
        ).json()["recolecciones"]
        assert [r["id"] for r in listado] == [recoleccion["id"]]

        maquinas = client.get("/api/maquinas", headers=auth_headers).json()["maquinas"]
        assert maquinas[0]["fechaUltimaRecoleccion"] == "2024-03-10T12:00:00.000Z"
        assert maquinas[0]["compartimentos"][0]["cantidadActual"] == 50

        rentabilidad = client.get(
            "/api/rentabilidad?inicio=2024-03-01&fin=2024-03-31", headers=auth_headers
        ).json()["rentabilidades"]
        assert rentabilidad[0]["ingresosTotales"] == pytest.approx(90.0)
        assert rentabilidad[0]["costosRecoleccion"] == pytest.approx(5.0)
        assert rentabilidad[0]["gananciaNeta"] == pytest.approx(85.0)

    def test_collection_for_unknown_machine(self, client, auth_headers):
        response = client.post(
            "/api/recolecciones",
            json={"maquinaId": "maquina-x", "ingresos": 10},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_collection_commission_out_of_range(self, client, auth_headers):
        response = client.post(
            "/api/recolecciones",
            json={"maquinaId": "maquina-x", "ingresos": 10, "comisionLocal": 150},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_comprobante_pdf(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        maquina = _crear_maquina(client, auth_headers, lugar["id"])
        recoleccion = client.post(
            "/api/recolecciones",
            json={"maquinaId": maquina["id"], "ingresos": 50, "comisionLocal": 20},
            headers=auth_headers,
        ).json()["recoleccion"]

        response = client.get(
            f"/api/recolecciones/{recoleccion['id']}/comprobante", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content[:4] == b"%PDF"

    def test_comprobante_unknown_is_404(self, client, auth_headers):
        response = client.get("/api/recolecciones/recoleccion-x/comprobante", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Recolección no encontrada"}

    def test_invalid_period(self, client, auth_headers):
        response = client.get("/api/rentabilidad?inicio=hoy", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Fecha inicio inválida"}

    def test_export_xlsx(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        _crear_maquina(client, auth_headers, lugar["id"])

        response = client.get("/api/rentabilidad/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "rentabilidad_" in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"


class TestCostosApi:
    def test_create_derives_costs_and_filters(self, client, auth_headers):
        response = client.post(
            "/api/costos",
            json={
                "tipoMaquina": "chiclera",
                "concepto": "Chicle bola",
                "cantidad": 1,
                "unidad": "kg",
                "costoTotal": 50,
                "unidadesPorKg": 100,
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        costo = response.json()["costo"]
        assert costo["costoPorUnidad"] == pytest.approx(0.5)
        assert client.get("/api/costos?tipo=peluchera", headers=auth_headers).json()["costos"] == []
        assert len(client.get("/api/costos?tipo=chiclera", headers=auth_headers).json()["costos"]) == 1

    def test_invalid_conversion_is_400(self, client, auth_headers):
        response = client.post(
            "/api/costos",
            json={
                "tipoMaquina": "chiclera",
                "concepto": "Chicle",
                "cantidad": 1,
                "unidad": "cajas",
                "costoTotal": 50,
            },
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestAuthApi:
    def test_signup_login_verify(self, client):
        signup = client.post(
            "/api/auth/signup",
            json={"email": "Ana@Test.com", "password": "secreta1", "nombre": "Ana"},
        )
        assert signup.status_code == 200
        assert "passwordHash" not in signup.json()["usuario"]

        login = client.post(
            "/api/auth/login", json={"email": "ana@test.com", "password": "secreta1"}
        )
        token = login.json()["token"]

        verify = client.post("/api/auth/verify", json={"token": token})
        assert verify.json()["valid"] is True
        assert verify.json()["usuario"]["email"] == "ana@test.com"

        by_header = client.post(
            "/api/auth/verify", headers={"Authorization": f"Bearer {token}"}
        )
        assert by_header.status_code == 200

    def test_duplicate_signup_is_409(self, client):
        body = {"email": "ana@test.com", "password": "secreta1"}
        client.post("/api/auth/signup", json=body)

        assert client.post("/api/auth/signup", json=body).status_code == 409

    def test_short_password_is_400(self, client):
        response = client.post(
            "/api/auth/signup", json={"email": "ana@test.com", "password": "123"}
        )
        assert response.status_code == 400

    def test_wrong_password_then_lockout(self, client):
        client.post("/api/auth/signup", json={"email": "ana@test.com", "password": "secreta1"})
        body = {"email": "ana@test.com", "password": "incorrecta"}

        statuses = [client.post("/api/auth/login", json=body).status_code for _ in range(6)]

        assert statuses[:5] == [401] * 5
        assert statuses[5] == 429

    def test_verify_invalid_token(self, client):
        response = client.post("/api/auth/verify", json={"token": "no-es-un-jwt"})

        assert response.status_code == 401
        assert response.json() == {"error": "Token inválido o expirado"}

    def test_verify_unknown_user(self, client):
        token = create_access_token("user-borrado")

        response = client.post("/api/auth/verify", json={"token": token})

        assert response.json() == {"error": "Usuario no encontrado"}


class TestMetaApi:
    def test_manifest(self, client, monkeypatch):
        monkeypatch.setenv("APP_URL", "https://vending.example.com/")
        monkeypatch.setenv("FARCASTER_HEADER", "h")
        monkeypatch.setenv("FARCASTER_PAYLOAD", "p")
        monkeypatch.setenv("FARCASTER_SIGNATURE", "s")

        response = client.get("/.well-known/farcaster.json")

        body = response.json()
        assert body["miniapp"]["homeUrl"] == "https://vending.example.com"
        assert body["accountAssociation"] == {"header": "h", "payload": "p", "signature": "s"}
        assert "max-age" in response.headers["cache-control"]

    def test_storage_status(self, client, auth_headers):
        _crear_lugar(client, auth_headers)

        response = client.get("/api/debug/storage", headers=auth_headers)

        body = response.json()
        assert body["backend"] == "memory"
        assert body["authenticated"] is True
        assert body["user"]["counts"]["lugares"] == 1
        assert body["user"]["keys"]["lugares"] == "vending:lugares:user-1"

    def test_storage_status_anonymous(self, client):
        body = client.get("/api/debug/storage").json()

        assert body["authenticated"] is False
        assert "user" not in body

    def test_notifications(self, client, auth_headers):
        lugar = _crear_lugar(client, auth_headers)
        _crear_maquina(client, auth_headers, lugar["id"])

        listado = client.get("/api/notificaciones-recoleccion", headers=auth_headers).json()
        envio = client.post("/api/notificaciones-recoleccion", json={}, headers=auth_headers).json()

        assert listado["notificaciones"][0]["prioridad"] == "alta"
        assert envio["enviado"] is False
