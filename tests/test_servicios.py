from datetime import datetime
from io import BytesIO

import pandas as pd
from bson import ObjectId
from fastapi.testclient import TestClient


def crear_servicio(client: TestClient, payload: dict) -> dict:
    response = client.post("/api/servicios", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_crear_servicio_calcula_total(client: TestClient, servicio_payload: dict):
    servicio = crear_servicio(client, servicio_payload)

    assert servicio["id"]
    assert servicio["nombre_paciente"] == "Rosa Martínez"
    assert servicio["fecha"] == "25/07/2024"
    assert servicio["hora"] == "10:30"
    assert servicio["fecha_visita"].startswith("2024-07-25T10:30")
    assert servicio["total"] == 27500
    assert servicio["realizado"] is False
    assert servicio["created_at"]


def test_precio_por_defecto_y_concepto_otros(client: TestClient):
    servicio = crear_servicio(client, {"nombre_paciente": "Ana", "fecha_visita": "2024-07-25T08:00:00"})

    assert servicio["precio"] == 20000
    assert servicio["total"] == 20000
    assert servicio["concepto"] == "Otros"
    assert servicio["actividades"] == []


def test_fecha_con_offset_conserva_hora_local(client: TestClient):
    servicio = crear_servicio(
        client, {"nombre_paciente": "Ana", "fecha_visita": "2024-07-25T10:00:00-05:00"}
    )

    assert servicio["fecha"] == "25/07/2024"
    assert servicio["hora"] == "10:00"
    assert servicio["fecha_visita"] == "2024-07-25T10:00:00"

    response = client.get(f"/api/reporte/individual/{servicio['id']}")
    assert response.status_code == 200


def test_fecha_en_utc_conserva_hora_indicada(client: TestClient):
    servicio = crear_servicio(
        client, {"nombre_paciente": "Ana", "fecha_visita": "2024-07-25T23:30:00Z"}
    )

    assert servicio["fecha"] == "25/07/2024"
    assert servicio["hora"] == "23:30"


def test_precio_negativo_es_rechazado(client: TestClient, servicio_payload: dict):
    servicio_payload["precio"] = -1
    response = client.post("/api/servicios", json=servicio_payload)

    assert response.status_code == 400
    errores = response.json()["detail"]["errors"]
    assert any("precio" in e for e in errores)


def test_precio_cero_es_valido(client: TestClient, servicio_payload: dict):
    servicio_payload["precio"] = 0
    servicio_payload["actividades"] = []
    servicio = crear_servicio(client, servicio_payload)

    assert servicio["precio"] == 0
    assert servicio["total"] == 0


def test_falta_nombre_paciente_un_solo_mensaje(client: TestClient, servicio_payload: dict):
    del servicio_payload["nombre_paciente"]
    response = client.post("/api/servicios", json=servicio_payload)

    assert response.status_code == 400
    errores = response.json()["detail"]["errors"]
    assert len(errores) == 1
    assert "nombre_paciente" in errores[0]


def test_concepto_fuera_del_enum(client: TestClient, servicio_payload: dict):
    servicio_payload["concepto"] = "Cirugía"
    response = client.post("/api/servicios", json=servicio_payload)

    assert response.status_code == 400
    assert any(e.startswith("concepto") for e in response.json()["detail"]["errors"])


def test_nombre_demasiado_largo(client: TestClient, servicio_payload: dict):
    servicio_payload["nombre_paciente"] = "x" * 101
    response = client.post("/api/servicios", json=servicio_payload)

    assert response.status_code == 400
    assert "nombre_paciente: no puede superar 100 caracteres" in response.json()["detail"]["errors"]


def test_fecha_invalida(client: TestClient, servicio_payload: dict):
    servicio_payload["fecha"] = "mañana"
    response = client.post("/api/servicios", json=servicio_payload)

    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0].startswith("fecha:")


def test_tipo_incorrecto_responde_400(client: TestClient, servicio_payload: dict):
    servicio_payload["precio"] = "veinte mil"
    response = client.post("/api/servicios", json=servicio_payload)

    assert response.status_code == 400
    assert response.json()["detail"]["errors"] == ["precio: debe ser un número"]


def test_obtener_servicio(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, servicio_payload)

    response = client.get(f"/api/servicios/{creado['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == creado["id"]


def test_obtener_inexistente_y_id_invalido(client: TestClient):
    assert client.get(f"/api/servicios/{ObjectId()}").status_code == 404
    assert client.get("/api/servicios/no-es-un-id").status_code == 400


def test_listar_ordenado_por_fecha_descendente_y_estable(client: TestClient):
    ids = []
    for nombre, fecha in [
        ("A", "2024-07-20T09:00:00"),
        ("B", "2024-07-25T09:00:00"),
        ("C", "2024-07-22T09:00:00"),
        ("D", "2024-07-25T09:00:00"),
    ]:
        ids.append(crear_servicio(client, {"nombre_paciente": nombre, "fecha_visita": fecha})["id"])

    response = client.get("/api/servicios")
    assert response.status_code == 200
    nombres = [s["nombre_paciente"] for s in response.json()]

    # B y D empatan: se mantiene el orden de inserción
    assert nombres == ["B", "D", "C", "A"]


def test_actualizar_servicio(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, servicio_payload)

    response = client.put(
        f"/api/servicios/{creado['id']}",
        json={"realizado": True, "precio": 30000, "hora": "16:45"},
    )
    assert response.status_code == 200, response.text
    actualizado = response.json()

    assert actualizado["realizado"] is True
    assert actualizado["precio"] == 30000
    assert actualizado["total"] == 37500
    assert actualizado["fecha"] == "25/07/2024"
    assert actualizado["hora"] == "16:45"
    assert actualizado["nombre_paciente"] == "Rosa Martínez"


def test_actualizar_revalida_documento(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, servicio_payload)

    response = client.put(f"/api/servicios/{creado['id']}", json={"precio": -5})
    assert response.status_code == 400

    sin_cambios = client.get(f"/api/servicios/{creado['id']}").json()
    assert sin_cambios["precio"] == 20000


def test_actualizar_con_null_borra_campos_opcionales(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, {**servicio_payload, "firma": "data:image/png;base64,AAAA"})
    assert creado["firma"]

    response = client.put(
        f"/api/servicios/{creado['id']}",
        json={"firma": None, "nombre_familiar": None},
    )
    assert response.status_code == 200, response.text
    assert response.json()["firma"] is None
    assert response.json()["nombre_familiar"] is None

    guardado = client.get(f"/api/servicios/{creado['id']}").json()
    assert guardado["firma"] is None
    assert guardado["nombre_familiar"] is None
    assert guardado["nombre_paciente"] == "Rosa Martínez"


def test_actualizar_con_null_en_obligatorio_es_rechazado(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, servicio_payload)

    assert client.put(f"/api/servicios/{creado['id']}", json={"precio": None}).status_code == 400
    assert client.put(
        f"/api/servicios/{creado['id']}", json={"nombre_paciente": None}
    ).status_code == 400

    assert client.get(f"/api/servicios/{creado['id']}").json()["precio"] == 20000


def test_actualizar_fecha_con_offset(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, servicio_payload)

    response = client.put(
        f"/api/servicios/{creado['id']}",
        json={"fecha_visita": "2024-07-26T18:15:00-05:00"},
    )
    assert response.status_code == 200, response.text
    assert response.json()["fecha"] == "26/07/2024"
    assert response.json()["hora"] == "18:15"


def test_actualizar_inexistente_y_id_invalido(client: TestClient):
    assert client.put(f"/api/servicios/{ObjectId()}", json={"realizado": True}).status_code == 404
    assert client.put("/api/servicios/123", json={"realizado": True}).status_code == 400


def test_eliminar_servicio(client: TestClient, servicio_payload: dict):
    creado = crear_servicio(client, servicio_payload)

    response = client.delete(f"/api/servicios/{creado['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get(f"/api/servicios/{creado['id']}").status_code == 404
    assert client.delete(f"/api/servicios/{creado['id']}").status_code == 404


def test_eliminar_todo_requiere_confirmacion(client: TestClient, servicio_payload: dict):
    crear_servicio(client, servicio_payload)

    response = client.delete("/api/servicios")
    assert response.status_code == 400
    assert len(client.get("/api/servicios").json()) == 1


def test_eliminar_todo_vacia_la_agenda(client: TestClient, servicio_payload: dict):
    crear_servicio(client, servicio_payload)
    cita = client.post("/api/agenda", json={"title": "Visita", "start": "2024-07-25T10:00:00"})
    assert cita.status_code == 201

    response = client.delete("/api/servicios", params={"confirmar": "true"})
    assert response.status_code == 200
    body = response.json()
    assert body["servicios_eliminados"] == 1
    assert body["citas_eliminadas"] == 1

    assert client.get("/api/servicios").json() == []
    assert client.get("/api/agenda").json() == []


def test_documento_legacy_se_normaliza(client: TestClient, mongo_db):
    result = mongo_db["servicios"].insert_one({
        "nombrePaciente": "Luis Pérez",
        "nombreAuxiliar": "Marta",
        "concepto": "Medicación",
        "fecha": "01/02/2024",
        "hora": "09:15",
        "precio": 20000,
        "actividades": [{"descripcion": "Inyección", "precio": 3000}],
    })
    servicio_id = str(result.inserted_id)

    leido = client.get(f"/api/servicios/{servicio_id}").json()
    assert leido["nombre_paciente"] == "Luis Pérez"
    assert leido["fecha"] == "01/02/2024"
    assert leido["hora"] == "09:15"
    assert leido["total"] == 23000

    response = client.put(f"/api/servicios/{servicio_id}", json={"realizado": True})
    assert response.status_code == 200, response.text

    guardado = mongo_db["servicios"].find_one({"_id": result.inserted_id})
    assert "fecha" not in guardado
    assert "nombrePaciente" not in guardado
    assert guardado["nombre_paciente"] == "Luis Pérez"
    assert guardado["fecha_visita"] == datetime(2024, 2, 1, 9, 15)
    assert guardado["total"] == 23000


def test_exportar_excel(client: TestClient, servicio_payload: dict):
    crear_servicio(client, servicio_payload)

    response = client.get("/api/servicios/export/excel")
    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]

    df = pd.read_excel(BytesIO(response.content))
    assert list(df["Paciente"]) == ["Rosa Martínez"]
    assert list(df["Total"]) == [27500]
