"""Create the movies table for local development"""
import psycopg2
from config import Config


def create_tables():
    print("Movie catalog database initialization")

    conn = psycopg2.connect(
        host=Config.POSTGRES_HOST,
        port=Config.POSTGRES_PORT,
        database=Config.POSTGRES_DB,
        user=Config.POSTGRES_USER,
        password=Config.POSTGRES_PASSWORD
    )

    try:
        cursor = conn.cursor()

        print("\nCreating 'movies' table...")
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS movies (
                id SERIAL PRIMARY KEY,
                name VARCHAR(255) NOT NULL,
                type VARCHAR(255),
                rating NUMERIC,
                image_url TEXT
            );
        """)

        cursor.execute("SELECT COUNT(*) FROM movies;")
        count = cursor.fetchone()[0]

        conn.commit()
        cursor.close()

        print(f"Movies table ready ({count} records)")
    except Exception as e:
        print(f"\nError: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()


if __name__ == '__main__':
    create_tables()
