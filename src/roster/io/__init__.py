# roster/io - Input/output handling
from .config_loader import load_roster, load_roster_dict
from .csv_loader import load_people, save_people
from .excel_export import export_to_csv, export_to_excel
from .results_export import build_results, export_results

__all__ = [
    "load_roster",
    "load_roster_dict",
    "load_people",
    "save_people",
    "export_to_excel",
    "export_to_csv",
    "export_results",
    "build_results",
]
