from farmdesk.services.pages.crops import CropsPage
from farmdesk.services.pages.dashboard import DashboardPage
from farmdesk.services.pages.expenses import ExpensesPage
from farmdesk.services.pages.farms import FarmsPage
from farmdesk.services.pages.income import IncomePage
from farmdesk.services.pages.reports import ReportsPage
from farmdesk.services.pages.tasks import TasksPage
from farmdesk.services.pages.weather import WeatherPage

__all__ = [
    "CropsPage",
    "DashboardPage",
    "ExpensesPage",
    "FarmsPage",
    "IncomePage",
    "ReportsPage",
    "TasksPage",
    "WeatherPage",
]
