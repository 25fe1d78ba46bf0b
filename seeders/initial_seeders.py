from models import factory_session
from seeders.initial_courses import initial_courses


def initial_seeders():
    with factory_session() as session:
        initial_courses(db=session, is_commit=True)
