# COMPONENT: SAMPLE CATALOG
# REQUIREMENTS SATISFIED: first-run demo content
"""
src/cinetech/services/sample_data.py

Five directors and five films loaded into an empty catalog on first start
(disabled with SEED_SAMPLE_DATA=0) or on demand through the API.
"""
from cinetech.schemas.models import Catalog, Director, Film

SAMPLE_DIRECTORS = [
    {"id": 1, "name": "Christopher Nolan", "nationality": "British", "birthdate": "1970-07-30",
     "bio": "British director, screenwriter and producer known for his intricate films."},
    {"id": 2, "name": "Quentin Tarantino", "nationality": "American", "birthdate": "1963-03-27",
     "bio": "American director, screenwriter and producer, master of dialogue and stylized violence."},
    {"id": 3, "name": "Steven Spielberg", "nationality": "American", "birthdate": "1946-12-18",
     "bio": "American director, screenwriter and producer, a pioneer of modern cinema."},
    {"id": 4, "name": "Martin Scorsese", "nationality": "American", "birthdate": "1942-11-17",
     "bio": "American director, screenwriter and producer, known for his crime films."},
    {"id": 5, "name": "James Cameron", "nationality": "Canadian", "birthdate": "1954-08-16",
     "bio": "Canadian director, screenwriter and producer, known for big-budget films."},
]

SAMPLE_FILMS = [
    {
        "id": 1, "title": "Inception", "directorId": 1, "year": 2010,
        "genre": "Science-fiction", "duration": 148, "rating": 8.8,
        "poster": "https://m.media-amazon.com/images/M/MV5BMjAxMzY3NjcxNF5BMl5BanBnXkFtZTcwNTI5OTM0Mw@@._V1_FMjpg_UX1000_.jpg",
        "synopsis": "A thief who steals corporate secrets through dream-sharing is tasked with planting an idea in a CEO's mind.",
        "createdAt": "2024-01-15T10:30:00Z",
    },
    {
        "id": 2, "title": "Pulp Fiction", "directorId": 2, "year": 1994,
        "genre": "Thriller", "duration": 154, "rating": 8.9,
        "poster": "https://m.media-amazon.com/images/M/MV5BNGNhMDIzZTUtNTBlZi00MTRlLWFjM2ItYzViMjE3YzI5MjljXkEyXkFqcGdeQXVyNzkwMjQ5NzM@._V1_FMjpg_UX1000_.jpg",
        "synopsis": "The lives of two hitmen, a boxer and a pair of diner bandits intertwine.",
        "createdAt": "2024-02-20T14:45:00Z",
    },
    {
        "id": 3, "title": "Jurassic Park", "directorId": 3, "year": 1993,
        "genre": "Adventure", "duration": 127, "rating": 8.2,
        "poster": "https://m.media-amazon.com/images/M/MV5BMjM2MDgxMDg0Nl5BMl5BanBnXkFtZTgwNTM2OTM5NDE@._V1_FMjpg_UX1000_.jpg",
        "synopsis": "An entrepreneur opens a theme park populated by cloned dinosaurs.",
        "createdAt": "2024-03-10T09:15:00Z",
    },
    {
        "id": 4, "title": "The Departed", "directorId": 4, "year": 2006,
        "genre": "Thriller", "duration": 151, "rating": 8.5,
        "poster": "https://m.media-amazon.com/images/M/MV5BMTI1MTY2OTIxNV5BMl5BanBnXkFtZTYwNjQ4NjY3._V1_FMjpg_UX1000_.jpg",
        "synopsis": "An undercover cop and a mole in the police try to identify each other in Boston.",
        "createdAt": "2024-03-25T16:20:00Z",
    },
    {
        "id": 5, "title": "Avatar", "directorId": 5, "year": 2009,
        "genre": "Science-fiction", "duration": 162, "rating": 7.9,
        "poster": "https://m.media-amazon.com/images/M/MV5BZDA0OGQxNTItMDZkMC00N2UyLTg3MzMtYTJmNjg3Nzk5MzRiXkEyXkFqcGdeQXVyMjUzOTY1NTc@._V1_FMjpg_UX1000_.jpg",
        "synopsis": "A paraplegic marine is sent to the moon Pandora on a unique mission.",
        "createdAt": "2024-04-05T11:10:00Z",
    },
]


def sample_catalog() -> Catalog:
    return Catalog(
        films=[Film.model_validate(f) for f in SAMPLE_FILMS],
        directors=[Director.model_validate(d) for d in SAMPLE_DIRECTORS],
    )
