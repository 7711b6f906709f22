"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

AUTO_FILL_COMMENT = "El profesor no registró la asistencia"
ARRIVAL_COMMENT_PREFIX = "Hora: "
ARRIVAL_COMMENT_PATTERN = r"Hora: (\d{2}:\d{2}(?::\d{2})?)"

LATE_MODIFICATION_WARNING = (
    "La clase ya ha terminado según el horario registrado. "
    "Los cambios que realice quedarán como modificaciones tardías."
)
UNDETERMINED_WINDOW_WARNING = "No se pudo determinar el horario de la clase"

DEFAULT_REQUEST_TIMEOUT = 20.0
ERROR_BODY_LOG_LIMIT = 500

# Natural key of an attendance row in the store.
ATTENDANCE_CONFLICT_COLUMNS = "curso_id,estudiante_id,fecha"
