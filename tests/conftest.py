import json
from contextlib import contextmanager

import pytest
from sqlalchemy.orm import Session

from framecart.app import create_app
from framecart.common.models import Animal, FrameMaterial, FramePricing, FrameSpecification
from framecart.config import FrameCartConfig


def ml(**texts) -> str:
    return json.dumps(texts, ensure_ascii=False)


@contextmanager
def orm_session(database):
    """ORM session on the shared connection, committed on success."""
    with database.lock:
        session = Session(bind=database.connection, autoflush=False, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


@pytest.fixture
def config():
    return FrameCartConfig(secret_key="test-secret", database_url="sqlite://")


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    yield app
    app.extensions["framecart_components"]["database"].close()


@pytest.fixture
def components(app):
    return app.extensions["framecart_components"]


@pytest.fixture
def executor(components):
    return components["executor"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def other_client(app):
    return app.test_client()


@pytest.fixture
def catalog(components):
    """Two animals, a priced and an unpriced frame, two materials."""
    with orm_session(components["database"]) as session:
        session.add_all(
            [
                Animal(id=1, name=ml(en="Fox", no="Rev"), category=ml(en="Mammals", no="Pattedyr"),
                       slug="fox", imageAspectRatio=1.5),
                Animal(id=2, name=ml(en="Owl", no="Ugle"), category=ml(en="Birds", no="Fugler"),
                       slug="owl", imageAspectRatio=0.75),
                FrameSpecification(id=1, name=ml(en="Small", no="Liten"), slug="small",
                                   frameWidthCm=30, frameHeightCm=40, imageAreaWidthCm=20,
                                   imageAreaHeightCm=30, matOpeningWidthCm=18, matOpeningHeightCm=28),
                FrameSpecification(id=2, name=ml(en="Huge"), slug="huge",
                                   frameWidthCm=100, frameHeightCm=140, imageAreaWidthCm=90,
                                   imageAreaHeightCm=130),
                FrameMaterial(id=1, name=ml(en="Oak", no="Eik"), material=ml(en="Wood", no="Tre"),
                              slug="oak", priceMultiplier=1.5, cssBackground="linear-gradient(#a0522d, #8b4513)"),
                FrameMaterial(id=2, name=ml(en="Black aluminium"), slug="black-alu", priceMultiplier=1.0,
                              cssBackground="#111"),
            ]
        )
        # pricing references the frame specifications above
        session.flush()
        session.add(FramePricing(id=1, frameSpecId=1, basePrice=100))


def login(client, user_id, role="user"):
    with client.session_transaction() as s:
        s["user"] = {"id": user_id, "role": role}
