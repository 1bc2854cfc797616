"""
Account provisioning.

Creates users together with their profile and role row, for sign-up, the
create-driver function and the demo-account seeding function.
"""

import logging
import secrets
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.exceptions import ValidationFailedError
from fleet_backend.app.core.security import generate_driver_password, get_password_hash
from fleet_backend.app.models.driver import Driver
from fleet_backend.app.models.enums import AppRole
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.user import User
from fleet_backend.app.models.user_role import UserRoleAssignment
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.schemas.functions import CreateDriverRequest, SeedResult, SeedStatus
from fleet_backend.app.services.changefeed import ChangeType, change_feed

logger = logging.getLogger(__name__)

DEFAULT_BASE_STATION = "Nairobi"
SEEDED_DRIVER_SCORE = 85


class DemoAccount(NamedTuple):
    email: str
    password: str
    full_name: str
    role: AppRole


TEST_ACCOUNTS: List[DemoAccount] = [
    DemoAccount("manager@safirismart.co.ke", "Manager2024!", "Fleet Manager", AppRole.FLEET_MANAGER),
    DemoAccount("operations@safirismart.co.ke", "Ops2024!", "Operations Team", AppRole.OPERATIONS),
    DemoAccount("john.kamau@safirismart.co.ke", "Driver2024!", "John Kamau", AppRole.DRIVER),
    DemoAccount("finance@safirismart.co.ke", "Finance2024!", "Finance Team", AppRole.FINANCE),
]


class AccountService:

    @staticmethod
    async def find_user(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def add_user(
        db: AsyncSession,
        email: str,
        password: str,
        full_name: str,
        role: Optional[AppRole] = None,
        mobile_phone: Optional[str] = None,
        base_station: Optional[str] = None,
    ) -> User:
        """
        Stage a user, their profile and (optionally) their role row.
        The caller commits.

        Raises:
            ValidationFailedError: if the email is already registered
        """
        if await AccountService.find_user(db, email):
            raise ValidationFailedError(
                "A user with this email address has already been registered",
                field="email",
            )

        user = User(email=email.lower(), hashed_password=get_password_hash(password), is_active=True)
        db.add(user)
        await db.flush()

        db.add(Profile(id=user.id, full_name=full_name, mobile_phone=mobile_phone, base_station=base_station))
        if role is not None:
            db.add(UserRoleAssignment(user_id=user.id, role=role))
        await db.flush()
        return user

    @staticmethod
    async def create_driver(db: AsyncSession, request: CreateDriverRequest) -> Tuple[Driver, str]:
        """
        Create a driver login plus driver row in one transaction.

        Returns:
            (driver, one-time password). The password is not stored in
            plain text anywhere and must not be logged.
        """
        if request.vehicle_id is not None:
            vehicle = (await db.execute(select(Vehicle.id).where(Vehicle.id == request.vehicle_id))).scalar_one_or_none()
            if vehicle is None:
                raise ValidationFailedError(f"Vehicle {request.vehicle_id} does not exist", field="vehicle_id")
            holder = (await db.execute(
                select(Driver.id).where(Driver.vehicle_id == request.vehicle_id)
            )).scalar_one_or_none()
            if holder is not None:
                raise ValidationFailedError(
                    f"Vehicle {request.vehicle_id} is already assigned to another driver",
                    field="vehicle_id",
                )

        password = generate_driver_password()
        try:
            user = await AccountService.add_user(
                db,
                email=request.email,
                password=password,
                full_name=request.full_name,
                role=AppRole.DRIVER,
                mobile_phone=request.mobile_phone,
                base_station=DEFAULT_BASE_STATION,
            )
            driver = Driver(
                user_id=user.id,
                license_number=request.license_number,
                vehicle_id=request.vehicle_id,
                performance_score=100,
                total_trips=0,
            )
            db.add(driver)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(driver)

        logger.info("Created driver account for %s (driver %s)", request.email, driver.id)
        change_feed.notify("drivers", ChangeType.INSERT, driver.id)
        return driver, password

    @staticmethod
    async def seed_test_accounts(db: AsyncSession) -> List[SeedResult]:
        """Create the four demo accounts; existing ones are left untouched."""
        results = []
        for account in TEST_ACCOUNTS:
            if await AccountService.find_user(db, account.email):
                results.append(SeedResult(email=account.email, status=SeedStatus.ALREADY_EXISTS))
                continue

            try:
                user = await AccountService.add_user(
                    db,
                    email=account.email,
                    password=account.password,
                    full_name=account.full_name,
                    role=account.role,
                )
                if account.role == AppRole.DRIVER:
                    db.add(Driver(
                        user_id=user.id,
                        license_number=f"DL-{secrets.randbelow(100000)}",
                        performance_score=SEEDED_DRIVER_SCORE,
                        total_trips=0,
                    ))
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("Error seeding %s: %s", account.email, e)
                results.append(SeedResult(email=account.email, status=SeedStatus.ERROR, error=str(e)))
                continue

            logger.info("Seeded test account %s", account.email)
            results.append(SeedResult(email=account.email, status=SeedStatus.CREATED, user_id=user.id))

        return results
