from studio.schemas.appointment import Appointment, AppointmentStatus
from studio.services.dashboard_service import compute_stats

SERVICES = [
    {"id": "svc-1", "name": "Fio a Fio"},
    {"id": "svc-2", "name": "Volume Russo"},
    {"id": "svc-3", "name": "Lash Lifting"},
]


def _appointment(appointment_id, service_id, price, status):
    return Appointment(
        id=appointment_id, serviceId=service_id, date="2025-06-10",
        time="09:00", price=price, status=status
    )


def test_revenue_split_by_status():
    appointments = [
        _appointment("a1", "svc-1", 130.0, AppointmentStatus.COMPLETED),
        _appointment("a2", "svc-2", 180.0, AppointmentStatus.COMPLETED),
        _appointment("a3", "svc-2", 180.0, AppointmentStatus.SCHEDULED),
        _appointment("a4", "svc-1", 130.0, AppointmentStatus.CANCELLED),
    ]

    stats = compute_stats(appointments, SERVICES)

    assert stats["totalRevenue"] == 310.0
    assert stats["pendingRevenue"] == 180.0
    assert stats["completedCount"] == 2
    assert stats["averageTicket"] == 155.0


def test_popular_services_ranked_by_bookings():
    appointments = [
        _appointment("a1", "svc-2", 180.0, AppointmentStatus.SCHEDULED),
        _appointment("a2", "svc-2", 180.0, AppointmentStatus.COMPLETED),
        _appointment("a3", "svc-1", 130.0, AppointmentStatus.SCHEDULED),
    ]

    stats = compute_stats(appointments, SERVICES)

    assert [s["serviceId"] for s in stats["popularServices"]] == ["svc-2", "svc-1", "svc-3"]
    assert stats["popularServices"][0]["count"] == 2
    assert stats["popularServices"][2]["count"] == 0


def test_empty_agenda():
    stats = compute_stats([], SERVICES)

    assert stats["totalRevenue"] == 0
    assert stats["averageTicket"] == 0
    assert stats["completedCount"] == 0
