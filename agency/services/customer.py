import logging

from sqlalchemy.orm import Session

import agency.repositories.agent as agent_repo
import agency.repositories.customer as customer_repo
from agency.db.models.customer import Customer as CustomerModel
from agency.db.models.customer import Vehicle as VehicleModel
from agency.errors import DuplicateResourceError, NotFoundError

logger = logging.getLogger(__name__)


def create_customer(
    db: Session,
    first_name: str,
    last_name: str,
    id_number: str,
    phone_number: str,
    email: str | None = None,
    city: str | None = None,
    agent_id: int | None = None,
) -> CustomerModel:
    """
    Create a new customer.

    - Validates the ID number is not already registered
    - Validates the agent exists if provided
    """
    if customer_repo.get_customer_by_id_number(db, id_number):
        raise DuplicateResourceError(
            f"Customer with ID number {id_number} already exists"
        )

    if agent_id is not None and not agent_repo.get_agent_by_id(db, agent_id):
        raise NotFoundError(f"Agent with id {agent_id} not found")

    customer = customer_repo.create_customer(
        db,
        first_name=first_name,
        last_name=last_name,
        id_number=id_number,
        phone_number=phone_number,
        email=email,
        city=city,
        agent_id=agent_id,
    )
    logger.info(f"Created customer {customer.id}")
    return customer


def get_customer(db: Session, customer_id: int) -> CustomerModel:
    customer = customer_repo.get_customer_by_id(db, customer_id)
    if not customer:
        raise NotFoundError(f"Customer with id {customer_id} not found")
    return customer


def create_vehicle(
    db: Session,
    customer_id: int,
    plate_number: str,
    model: str,
    vehicle_type: str,
    manufacture_year: int | None = None,
) -> VehicleModel:
    get_customer(db, customer_id)
    vehicle = customer_repo.create_vehicle(
        db,
        customer_id=customer_id,
        plate_number=plate_number,
        model=model,
        vehicle_type=vehicle_type,
        manufacture_year=manufacture_year,
    )
    logger.info(f"Added vehicle {vehicle.id} ({plate_number}) to customer {customer_id}")
    return vehicle
