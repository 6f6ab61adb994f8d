from .problem import ProblemScraper
from .search import SearchScraper
from .tracker import WorkbookTracker
from .workbook import WorkbookScraper

__all__ = ["ProblemScraper", "SearchScraper", "WorkbookScraper", "WorkbookTracker"]
