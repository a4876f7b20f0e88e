from library_catalog.items import Book, Magazine
from utils.search import binary_search, filter_by_availability, find_all_subcategories

def test_binary_search():
    values = [1, 3, 5, 7, 9, 11]
    assert binary_search(values, 1) == 0
    assert binary_search(values, 7) == 3
    assert binary_search(values, 11) == 5
    assert binary_search(values, 4) == -1
    assert binary_search([], 4) == -1

def test_binary_search_strings():
    assert binary_search(["B001", "B002", "D001", "M001"], "D001") == 2

def test_find_all_subcategories():
    hierarchy = {
        "Non-Fiction": ["Science", "History"],
        "Science": ["Physics", "Biology"],
        "Physics": ["Quantum"],
    }
    assert find_all_subcategories("Non-Fiction", hierarchy) == ["Science", "Physics", "Quantum", "Biology", "History"]
    assert find_all_subcategories("History", hierarchy) == []
    assert find_all_subcategories("Unknown", hierarchy) == []

def test_find_all_subcategories_cycle():
    hierarchy = {"A": ["B"], "B": ["A", "C"]}
    assert find_all_subcategories("A", hierarchy) == ["B", "C"]

def test_filter_by_availability():
    book = Book("B1", "T", "A", "1234567890", 10)
    mag = Magazine("M1", "T", 3, "Pub")
    mag.is_available = False
    assert filter_by_availability([book, mag], True) == [book]
    assert filter_by_availability([book, mag], False) == [mag]
