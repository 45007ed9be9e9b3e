# barbershop/data.py

# Served by GET /admin/scheduling/templates until an admin stores their own
DEFAULT_SHIFT_TEMPLATES = [
    {
        "id": "tpl-1",
        "name": "Full Day (10-10)",
        "start_time": "10:00",
        "end_time": "22:00",
        "break_start": "13:00",
        "break_end": "14:00",
    },
    {
        "id": "tpl-2",
        "name": "Half Day (12-5)",
        "start_time": "12:00",
        "end_time": "17:00",
        "break_start": None,
        "break_end": None,
    },
]

# Sunday; the shop is closed, used for the "no preference" date list
CLOSED_WEEKDAYS = {6}
