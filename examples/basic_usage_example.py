#!/usr/bin/env python3
"""
Basic usage examples for the vet-scheduling package.

This example walks through a clinic day: registering a veterinarian and a
weekly shift, listing the day's slots, finding who can take a slot, booking
and confirming an appointment, and reading a pet's clinical history.
"""

import asyncio
import os

from vet_scheduling import (
    SchedulingSettings,
    SlotConflictException,
    ValidationException,
    create_scheduling_engine,
)
from vet_scheduling.models import PetSpecies
from vet_scheduling.utils import LoggingConfigurator, format_time_of_day


async def setup_engine():
    """Build an engine on an in-memory database unless DATABASE_URL is set."""
    settings = SchedulingSettings(
        database_url=os.getenv(
            "VET_SCHEDULING_DATABASE_URL", "sqlite+aiosqlite:///:memory:"
        )
    )
    return await create_scheduling_engine(settings)


async def register_staff_example(engine):
    """Example: Adding a veterinarian and a Tuesday morning shift."""
    print("\n=== Registering Staff Example ===")

    vet = await engine.shifts.add_veterinarian(
        {"first_name": "Ana", "last_name": "Perez", "specialty": "Surgery"}
    )
    print(f"✓ Veterinarian created: {vet.display_name}")

    shift = await engine.shifts.add_shift(
        {
            "veterinarian_id": vet.id,
            "weekday": "tuesday",
            "start_time": "08:00",
            "end_time": "14:00",
        }
    )
    print(f"✓ Shift added: {shift.weekday.value} {shift.start_time}-{shift.end_time}")
    return vet


async def register_patient_example(engine):
    """Example: Storing the client and pet that appointments refer to."""
    print("\n=== Registering Patient Example ===")

    client = await engine.store.create(
        "clients", {"first_name": "Laura", "last_name": "Gomez"}
    )
    pet = await engine.store.create(
        "pets", {"client_id": client.id, "name": "Luna", "species": PetSpecies.CAT}
    )
    print(f"✓ Pet {pet.name} registered for {client.full_name}")
    return client, pet


async def booking_example(engine, client, pet):
    """Example: Finding a veterinarian and booking a slot."""
    print("\n=== Booking Example ===")

    slots = engine.generate_slots()
    print(f"✓ {len(slots)} slots from {format_time_of_day(slots[0])} "
          f"to {format_time_of_day(slots[-1])}")

    vets = await engine.resolve_available_veterinarians("2025-03-04", "10:00")
    print(f"✓ Available on Tuesday 10:00: {[vet.display_name for vet in vets]}")

    appointment = await engine.create_appointment(
        {
            "date": "2025-03-04",
            "time": "10:00",
            "reason": "Annual vaccination",
            "pet_id": pet.id,
            "client_id": client.id,
            "veterinarian_id": vets[0].id,
        }
    )
    print(f"✓ Appointment booked: {appointment.id} ({appointment.status.value})")

    try:
        await engine.create_appointment(
            {
                "date": "2025-03-04",
                "time": "10:00",
                "reason": "Nail trim",
                "pet_id": pet.id,
                "client_id": client.id,
            }
        )
    except SlotConflictException as e:
        print(f"✓ Double booking rejected: {e.message}")

    try:
        await engine.create_appointment({"date": "2025-03-04", "time": "25:00"})
    except ValidationException as e:
        print(f"✓ Invalid draft rejected: {e.message}")

    return appointment


async def lifecycle_example(engine, appointment, pet):
    """Example: Confirming, completing and reading the history."""
    print("\n=== Lifecycle Example ===")

    appointment = await engine.change_status(appointment.id, "confirmed")
    print(f"✓ Status: {appointment.get_status_display()}")

    appointment = await engine.change_status(appointment.id, "completed")
    print(f"✓ Status: {appointment.get_status_display()}")

    await engine.store.create(
        "treatments",
        {"appointment_id": appointment.id, "diagnosis": "Healthy, vaccinated"},
    )

    for visit in await engine.get_pet_history(pet.id):
        treatment = visit.treatment.diagnosis if visit.treatment else "no treatment"
        print(f"✓ {visit.date} {visit.slot_label} {visit.reason}: {treatment}")


async def main():
    """Run all basic usage examples."""
    LoggingConfigurator.configure_basic_logging("WARNING")

    engine = await setup_engine()
    try:
        await register_staff_example(engine)
        client, pet = await register_patient_example(engine)
        appointment = await booking_example(engine, client, pet)
        await lifecycle_example(engine, appointment, pet)
    finally:
        await engine.close()


if __name__ == "__main__":
    asyncio.run(main())
