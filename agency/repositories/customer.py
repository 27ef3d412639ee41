from sqlalchemy.orm import Session

from agency.db.models.customer import Customer as CustomerModel
from agency.db.models.customer import Vehicle as VehicleModel


def get_customer_by_id(db: Session, customer_id: int) -> CustomerModel | None:
    """Get a customer by ID."""
    return db.query(CustomerModel).filter(CustomerModel.id == customer_id).first()


def get_customer_for_update(db: Session, customer_id: int) -> CustomerModel | None:
    """Get a customer row locked for the rest of the transaction (where supported)."""
    return (
        db.query(CustomerModel)
        .filter(CustomerModel.id == customer_id)
        .with_for_update()
        .first()
    )


def get_all_customers(
    db: Session, page: int = 1, page_size: int = 100, search: str | None = None
) -> tuple[list[CustomerModel], int]:
    """
    Get customers with pagination, sorted by ID for stable pagination.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        search: Case-insensitive fragment of a name, ID number or phone

    Returns:
        Tuple of (list of customers, total count)
    """
    query = db.query(CustomerModel)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            CustomerModel.first_name.ilike(pattern)
            | CustomerModel.last_name.ilike(pattern)
            | CustomerModel.id_number.ilike(pattern)
            | CustomerModel.phone_number.ilike(pattern)
        )
    total = query.count()
    skip = (page - 1) * page_size
    customers = query.order_by(CustomerModel.id).offset(skip).limit(page_size).all()
    return customers, total


def get_customer_by_id_number(db: Session, id_number: str) -> CustomerModel | None:
    return db.query(CustomerModel).filter(CustomerModel.id_number == id_number).first()


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
    """Create a new customer in the database. Pure data access - no business logic."""
    db_customer = CustomerModel(
        first_name=first_name,
        last_name=last_name,
        id_number=id_number,
        phone_number=phone_number,
        email=email,
        city=city,
        agent_id=agent_id,
    )
    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)
    return db_customer


def get_vehicle_by_id(db: Session, vehicle_id: int) -> VehicleModel | None:
    """Get a vehicle by ID."""
    return db.query(VehicleModel).filter(VehicleModel.id == vehicle_id).first()


def create_vehicle(
    db: Session,
    customer_id: int,
    plate_number: str,
    model: str,
    vehicle_type: str,
    manufacture_year: int | None = None,
) -> VehicleModel:
    """Create a new vehicle in the database. Pure data access - no business logic."""
    db_vehicle = VehicleModel(
        customer_id=customer_id,
        plate_number=plate_number,
        model=model,
        vehicle_type=vehicle_type,
        manufacture_year=manufacture_year,
    )
    db.add(db_vehicle)
    db.commit()
    db.refresh(db_vehicle)
    return db_vehicle
