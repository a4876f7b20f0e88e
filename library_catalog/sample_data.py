from library_catalog.items import DVD, Book, Magazine
from library_catalog.library import Library
from library_catalog.member import Member


def seed_sample_data(library: Library) -> None:
    """Load the demo catalog used by the console."""
    library.add_item(Book("B001", "The Kotlin Guide", "Kashif", "9781234567890", 300), "Non-Fiction")
    library.add_item(Book("B002", "Effective Kotlin", "AbdulBasit", "9788328343787", 360), "Non-Fiction")
    library.add_item(DVD("D001", "Kotlin Tutorial", "Ahmed Ali", 120, "Educational"), "Reference")
    library.add_item(Magazine("M001", "Tech Monthly", 42, "TechPress"), "Periodicals")

    library.register_member(Member("M001", "Alice Johnson", "alice@email.com"))
    library.register_member(Member("M002", "Bob Lee", "bob.lee@email.com"))
