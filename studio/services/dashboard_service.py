from typing import Dict, Any, Sequence
from collections import Counter
from studio.db.appointments import find_appointments
from studio.schemas.appointment import Appointment, AppointmentStatus
from studio.services.catalog_service import get_services

def compute_stats(
    appointments: Sequence[Appointment],
    services: Sequence[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Revenue and popularity figures for the admin dashboard

    Args:
        appointments: All appointments, any status
        services: Catalog entries (dicts with "id" and "name")

    Returns:
        totalRevenue from completed appointments, pendingRevenue from
        scheduled ones, the completed count, the average ticket and the
        catalog ranked by number of bookings
    """
    completed = [a for a in appointments if a.status == AppointmentStatus.COMPLETED]
    scheduled = [a for a in appointments if a.status == AppointmentStatus.SCHEDULED]

    total_revenue = sum(a.price for a in completed)
    pending_revenue = sum(a.price for a in scheduled)
    average_ticket = total_revenue / len(completed) if completed else 0.0

    bookings_per_service = Counter(a.serviceId for a in appointments)
    popular_services = sorted(
        (
            {"serviceId": s["id"], "name": s["name"], "count": bookings_per_service.get(s["id"], 0)}
            for s in services
        ),
        key=lambda entry: entry["count"],
        reverse=True
    )

    return {
        "totalRevenue": round(total_revenue, 2),
        "pendingRevenue": round(pending_revenue, 2),
        "completedCount": len(completed),
        "averageTicket": round(average_ticket, 2),
        "popularServices": popular_services
    }

async def get_dashboard_stats() -> Dict[str, Any]:
    """
    Load appointments and catalog and compute the dashboard figures
    """
    appointments = await find_appointments({})
    services = await get_services()
    return compute_stats(appointments, services)
