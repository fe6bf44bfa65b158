#!/usr/bin/env python3
"""
Reset the Mongo-backed demo data.

Usage:
	python scripts/reset_demo.py [--no-seed]
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from tavno.infra.db import close_client, get_db
from tavno.infra.mongo.persistence import MongoPersistence
from tavno.infra.passwords import Pbkdf2Hasher
from tavno.infra.repo.quests_repo import QuestsRepoStore
from tavno.infra.repo.users_repo import UsersRepoStore
from tavno.infra.seed import seed_demo_data
from tavno.infra.store import COLLECTIONS, DocumentStore


async def reset_demo(reseed: bool) -> None:
	db = get_db()
	try:
		for name in COLLECTIONS:
			logging.info("Dropping collection %s", name)
			await db.drop_collection(name)
		if reseed:
			store = DocumentStore(MongoPersistence(db))
			await store.load()
			await seed_demo_data(UsersRepoStore(store), QuestsRepoStore(store), Pbkdf2Hasher())
			logging.info("Demo accounts and quests recreated.")
	finally:
		await close_client()


def main() -> None:
	parser = argparse.ArgumentParser(description="Reset Tavno demo data")
	parser.add_argument("--no-seed", action="store_true", help="Leave the collections empty")
	args = parser.parse_args()

	logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
	asyncio.run(reset_demo(reseed=not args.no_seed))


if __name__ == "__main__":
	main()
