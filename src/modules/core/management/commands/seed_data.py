from __future__ import annotations

import random

from decouple import config
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.models import Role, User
from modules.branches.models import Branch
from modules.products.models import Category, Product


class Command(BaseCommand):
    help = "Seed database with branches, a product catalogue and one user per role."

    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-password",
            default=config("SEED_ADMIN_PASSWORD", default="Admin@123"),
            help="Password for the seeded admin account.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        branches = self._seed_branches()
        products = self._seed_products()
        users_created = self._seed_users(branches, options["admin_password"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"branches={len(branches)}, "
                f"products={len(products)}, "
                f"users={users_created}"
            )
        )

    def _seed_branches(self) -> list[Branch]:
        self.stdout.write("Creating branches...")
        branches: list[Branch] = []
        for code, name, address in [
            ("CTR", "Central Kitchen", "1 Market Street"),
            ("NTH", "North Cafe", "48 Harbour Road"),
            ("STH", "South Cafe", "7 Station Square"),
        ]:
            branch, _ = Branch.objects.get_or_create(
                code=code, defaults={"name": name, "address": address}
            )
            branches.append(branch)
        self.stdout.write(self.style.SUCCESS("Creating branches... Done!"))
        return branches

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalogue = {
            "Coffee": ["Espresso Beans 1kg", "Decaf Beans 1kg", "Cold Brew Concentrate"],
            "Dairy": ["Whole Milk 2L", "Oat Milk 1L", "Whipping Cream 500ml"],
            "Bakery": ["Croissant Dough", "Sourdough Loaf", "Blueberry Muffin Mix"],
            "Supplies": ["Paper Cups 12oz", "Cup Lids", "Napkins"],
        }
        for category_name, names in catalogue.items():
            category, _ = Category.objects.get_or_create(name=category_name)
            for name in names:
                product, _ = Product.objects.get_or_create(
                    name=name,
                    category=category,
                    defaults={"stock_quantity": random.randint(20, 200)},
                )
                products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_users(self, branches: list[Branch], admin_password: str) -> int:
        created = 0
        if not User.objects.filter(role=Role.ADMIN).exists():
            User.objects.create_user(
                "admin",
                email="admin@cafe.com",
                password=admin_password,
                role=Role.ADMIN,
                is_staff=True,
            )
            created += 1
        for username, role, branch in [
            ("manager", Role.MANAGER, branches[0]),
            ("staff", Role.STAFF, branches[1]),
        ]:
            if not User.objects.filter(username=username).exists():
                User.objects.create_user(
                    username,
                    password=f"{username.capitalize()}@123",
                    role=role,
                    branch=branch,
                )
                created += 1
        return created
