from __future__ import annotations

from typing import Dict, List

from app import models
from app.core.security import hash_password
from app.db import Base, SessionLocal, engine

DEMO_PASSWORD = "demo123"

DEMO_USERS = ["alice@example.com", "bob@example.com", "carol@example.com"]


def _get_or_create_user(db, email: str) -> models.User:
    user = db.query(models.User).filter(models.User.email == email).first()
    if user:
        return user

    user = models.User(email=email, hashed_password=hash_password(DEMO_PASSWORD))
    db.add(user)
    db.flush()
    return user


def seed_users(db) -> Dict[str, models.User]:
    return {email.split("@")[0]: _get_or_create_user(db, email) for email in DEMO_USERS}


def seed_projects(db, users: Dict[str, models.User]) -> List[models.Project]:
    projects_data = [
        {
            "name": "Launch",
            "description": "Marketing site and release checklist",
            "owner": "alice",
            "members": ["bob"],
        },
        {
            "name": "Infra migration",
            "description": "Move staging to the new cluster",
            "owner": "bob",
            "members": ["alice", "carol"],
        },
    ]

    projects: List[models.Project] = []
    for data in projects_data:
        owner = users[data["owner"]]
        project = (
            db.query(models.Project)
            .filter(models.Project.name == data["name"], models.Project.owner_id == owner.id)
            .first()
        )
        if not project:
            project = models.Project(name=data["name"], description=data["description"], owner_id=owner.id)
            db.add(project)
            db.flush()
            # Owner membership plus invited members
            for user in [owner] + [users[name] for name in data["members"]]:
                db.add(models.Membership(project_id=project.id, user_id=user.id))
            db.flush()
        projects.append(project)
    return projects


def seed_tasks(db, projects: List[models.Project], users: Dict[str, models.User]) -> None:
    tasks_data = {
        "Launch": [
            ("Design", "Draft landing page layout", "todo", "bob"),
            ("Copy", "Write release announcement", "in-progress", "alice"),
            ("Domain", "Renew the domain", "done", "alice"),
        ],
        "Infra migration": [
            ("Inventory", "List services running on staging", "done", "carol"),
            ("Cutover plan", "Agree on the cutover window", "todo", "bob"),
        ],
    }

    for project in projects:
        if db.query(models.Task).filter(models.Task.project_id == project.id).first():
            continue
        for title, description, status, assignee in tasks_data.get(project.name, []):
            db.add(
                models.Task(
                    title=title,
                    description=description,
                    status=status,
                    project_id=project.id,
                    assignee_id=users[assignee].id,
                )
            )
    db.flush()


def seed_demo_data() -> None:
    db = SessionLocal()
    try:
        Base.metadata.create_all(bind=engine)

        users = seed_users(db)
        projects = seed_projects(db, users)
        seed_tasks(db, projects, users)
        db.commit()

        print(f"Demo data seeded successfully. Log in as {', '.join(DEMO_USERS)} / {DEMO_PASSWORD}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_data()
