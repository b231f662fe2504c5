"""
BillSplit GUI
- Create an event, add the people at the table and the items they ordered.
- Mark who shares each item; see what everyone owes with tax and tip.
- Export the bill summary to Excel.

Run:
  python split_bill_gui.py

Dependencies:
  pip install openpyxl
(Tkinter ships with most Python distributions; on some Linux you may need: sudo apt-get install python3-tk)
"""
from __future__ import annotations

try:
    import tkinter as tk
except ModuleNotFoundError:
    tk = None

from colors import RandomHueColorAssigner
from config import configure_logging, get_default_settings
from store import EventStore


def main():
    """Main entry point for the application"""
    if tk is None:
        raise RuntimeError(
            'tkinter is not available. Install it (e.g., on Ubuntu: sudo apt-get install python3-tk) '
            'and re-run to use the GUI.'
        )

    from main_app import SplitBillApp

    settings = get_default_settings()
    configure_logging(settings.log_level)
    store = EventStore(color_assigner=RandomHueColorAssigner())

    root = tk.Tk()
    app = SplitBillApp(root, store, settings)
    root.mainloop()


if __name__ == "__main__":
    main()
