# seed_users.py
from climbcomp.run import api
from climbcomp.helpers.store import get_store
from climbcomp.models import Category, Gender, Role

INITIAL_USERS = [
    ("Admin User", "admin@test.com", 999, Role.ADMIN, Gender.MASCULI, Category.ABSOLUTA),
    ("Arbiter User", "arbiter@test.com", 998, Role.ARBITER, Gender.FEMENI, Category.ABSOLUTA),
    ("Alex Roca", "alex@test.com", 101, Role.PARTICIPANT, Gender.MASCULI, Category.SUB18),
    ("Laia Font", "laia@test.com", 102, Role.PARTICIPANT, Gender.FEMENI, Category.UNIVERSITARI),
    ("Marc Soler", "marc@test.com", 103, Role.PARTICIPANT, Gender.MASCULI, Category.ABSOLUTA),
]

def main():
    with api.app_context():
        store = get_store()
        existing = len(store.list_users())
        print(f"Existing users: {existing}")

        for full_name, email, bib, role, gender, category in INITIAL_USERS:
            # re-running the seed must not duplicate anyone
            if store.find_user_by_email(email) or store.find_user_by_bib(bib):
                continue
            store.add_user(
                full_name=full_name,
                email=email,
                bib_number=bib,
                role=role.value,
                gender=gender.value,
                category=category.value,
            )

        total = len(store.list_users())
        print(f"Now have {total} users in the DB.")

if __name__ == "__main__":
    main()
