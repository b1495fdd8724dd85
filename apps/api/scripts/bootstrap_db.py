"""Create database schema and seed sample agents and listings for development."""
from __future__ import annotations

import asyncio

from sqlalchemy import delete

from realty.core.security import hash_password
from realty.db.session import SessionLocal, engine
from realty.models import Agent, Listing, ListingStatus, Showing
from realty.models.base import Base

SEED_PASSWORD = "password123"

AGENTS = [
	{
		"name": "John Smith",
		"email": "john@example.com",
		"phone": "2051234567",
		"license_number": "AL-RE-12345",
		"is_active": True,
	},
	{
		"name": "Sarah Johnson",
		"email": "sarah@example.com",
		"phone": "2059876543",
		"license_number": "AL-RE-67890",
		"is_active": True,
	},
	{
		"name": "Mike Davis",
		"email": "mike@example.com",
		"phone": "2055551234",
		"license_number": "AL-RE-11111",
		"is_active": True,
	},
	{
		"name": "Emily Brown (Inactive)",
		"email": "emily@example.com",
		"phone": "2055559999",
		"license_number": "AL-RE-99999",
		"is_active": False,
	},
]

# price, address, square feet, ZIP, status, images
LISTINGS = [
	(50_000, "101 Budget Ln, Huntsville, AL 35801", 500, "35801", ListingStatus.ACTIVE, []),
	(75_000, "202 Starter Ave, Decatur, AL 35601", 750, "35601", ListingStatus.INACTIVE, ["https://example.com/img1.jpg"]),
	(120_000, "303 Economy Dr, Madison, AL 35758", 900, "35758", ListingStatus.PENDING, []),
	(149_999, "404 Thrift Blvd, Athens, AL 35611", 1100, "35611", ListingStatus.SOLD, ["https://example.com/img2.jpg", "https://example.com/img3.jpg"]),
	(150_000, "505 Maple St, Huntsville, AL 35802", 1200, "35802", ListingStatus.ACTIVE, []),
	(199_999, "606 Cedar Ct, Madison, AL 35757", 1400, "35757", ListingStatus.ACTIVE, ["https://example.com/img4.jpg"]),
	(250_000, "707 Elm Way, Huntsville, AL 35803", 1600, "35803", ListingStatus.PENDING, ["https://example.com/img5.jpg", "https://example.com/img6.jpg"]),
	(275_000, "808 Birch Rd, Decatur, AL 35603", 1800, "35603", ListingStatus.ACTIVE, []),
	(300_000, "909 Oakwood Dr, Huntsville, AL 35801", 2000, "35801", ListingStatus.SOLD, ["https://example.com/img7.jpg"]),
	(325_000, "2222 Postal Way, Huntsville, AL 35801-1234", 2100, "35801-1234", ListingStatus.ACTIVE, ["https://example.com/img30.jpg"]),
	(350_000, "1010 Willow Ln, Madison, AL 35758", 2200, "35758", ListingStatus.ACTIVE, []),
	(425_000, "1111 Pine Crest Ave, Huntsville, AL 35802", 2500, "35802", ListingStatus.INACTIVE, []),
	(475_000, "2323 Extended Zip Ct, Madison, AL 35758-5678", 2700, "35758-5678", ListingStatus.PENDING, []),
	(499_999, "1212 Spruce Ct, Athens, AL 35611", 2800, "35611", ListingStatus.PENDING, ["https://example.com/img11.jpg"]),
	(500_000, "1313 Magnolia Blvd, Huntsville, AL 35806", 3000, "35806", ListingStatus.ACTIVE, []),
	(650_000, "1414 Dogwood Trl, Madison, AL 35757", 3500, "35757", ListingStatus.SOLD, []),
	(750_000, "2525 Penthouse Ct, Huntsville, AL 35806", 600, "35806", ListingStatus.ACTIVE, []),
	(800_000, "1515 Hickory Hill Rd, Huntsville, AL 35802", 4000, "35802", ListingStatus.ACTIVE, ["https://example.com/img14.jpg"]),
	(85_000, "2424 Warehouse District Rd, Decatur, AL 35603", 8000, "35603", ListingStatus.ACTIVE, []),
	(999_999, "1616 Sycamore Ln, Huntsville, AL 35801", 4500, "35801", ListingStatus.INACTIVE, []),
	(1_000_000, "1717 Lakeview Estates Dr, Huntsville, AL 35803", 5000, "35803", ListingStatus.ACTIVE, ["https://example.com/img19.jpg"]),
	(1_500_000, "1818 Summit Ridge Way, Madison, AL 35758", 6000, "35758", ListingStatus.PENDING, []),
	(2_500_000, "1919 Grand Manor Ct, Huntsville, AL 35806", 8000, "35806", ListingStatus.ACTIVE, []),
	(5_000_000, "2020 Prestige Pointe Dr, Huntsville, AL 35802", 10_000, "35802", ListingStatus.ACTIVE, []),
]


async def create_schema() -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_agents() -> list[Agent]:
	"""Replace all agents with the demo accounts."""

	password_hash = hash_password(SEED_PASSWORD)
	async with SessionLocal() as session:
		async with session.begin():
			await session.execute(delete(Showing))
			await session.execute(delete(Listing))
			await session.execute(delete(Agent))
			agents = [Agent(password_hash=password_hash, **data) for data in AGENTS]
			session.add_all(agents)
	return agents


async def seed_listings(agents: list[Agent]) -> int:
	"""Insert demo listings, spread round-robin over the active agents."""

	owners = [agent for agent in agents if agent.is_active]
	async with SessionLocal() as session:
		async with session.begin():
			for index, (price, address, square_feet, zip_code, status, images) in enumerate(LISTINGS):
				session.add(
					Listing(
						price=price,
						address=address,
						square_feet=square_feet,
						zip_code=zip_code,
						status=status,
						images=images,
						created_by=owners[index % len(owners)].id,
					)
				)
	return len(LISTINGS)


async def main() -> None:
	await create_schema()
	agents = await seed_agents()
	listing_count = await seed_listings(agents)
	await engine.dispose()
	print(f"Database schema ensured; seeded {len(agents)} agents and {listing_count} listings.")
	print(f"Log in as {AGENTS[0]['email']} / {SEED_PASSWORD}")


if __name__ == "__main__":
	asyncio.run(main())
