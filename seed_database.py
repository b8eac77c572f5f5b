from datetime import datetime, timezone
import uuid

# Misma conexión que el servicio (MONGODB_URI y MONGODB_DB del archivo .env)
from events_server import database

db = database.db


def millis(year, month, day, hour, minute=0):
    """Fecha en milisegundos desde epoch (UTC), el formato con el que se guardan los eventos."""
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp() * 1000)


def evento(titulo, inicio, fin, usuario, categoria):
    return {
        "_id": str(uuid.uuid4()),
        "titulo": titulo,
        "fechaInicio": inicio,
        "fechaFin": fin,
        "email": usuario["_id"],
        "nombreUsuario": usuario["nombre"],
        "categoria": categoria,
    }


try:
    # Eliminamos las colecciones si ya existen para empezar desde cero.
    print("\nLimpiando colecciones antiguas...")
    db.drop_collection('usuarios')
    db.drop_collection('categorias')
    db.drop_collection('eventos')
    print("🧹 Colecciones 'usuarios', 'categorias' y 'eventos' eliminadas.")
    database.ensure_indexes()

    print("\nGenerando datos de ejemplo...")

    # 1. Insertar Usuarios
    ana = {"_id": "ana.garcia@iesjandula.es", "email": "ana.garcia@iesjandula.es", "nombre": "Ana García"}
    luis = {"_id": "luis.moreno@iesjandula.es", "email": "luis.moreno@iesjandula.es", "nombre": "Luis Moreno"}
    db['usuarios'].insert_many([ana, luis])
    print("✅ 2 usuarios de ejemplo insertados.")

    # 2. Insertar Categorías
    db['categorias'].insert_many([
        {"_id": "Reuniones", "nombre": "Reuniones", "color": "#3B82F6"},
        {"_id": "Excursiones", "nombre": "Excursiones", "color": "#22C55E"},
        {"_id": "Exámenes", "nombre": "Exámenes", "color": "#EF4444"},
    ])
    print("✅ 3 categorías de ejemplo insertadas.")

    # 3. Insertar Eventos
    db['eventos'].insert_many([
        evento("Claustro de inicio de curso", millis(2025, 9, 8, 9), millis(2025, 9, 8, 11), ana, "Reuniones"),
        evento("Visita al Museo de la Ciencia", millis(2025, 11, 14, 8, 30), millis(2025, 11, 14, 14), luis, "Excursiones"),
        evento("Examen de Matemáticas 2ºB", millis(2025, 12, 3, 10), millis(2025, 12, 3, 11), ana, "Exámenes"),
    ])
    print("✅ 3 eventos de ejemplo insertados.")

    print("\n🎉 Base de datos poblada con éxito.")

except Exception as e:
    print(f"❌ Ocurrió un error al poblar la base de datos: {e}")
finally:
    database.client.close()
