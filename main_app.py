"""
Main application window for BillSplit GUI
"""
from __future__ import annotations
from typing import Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, simpledialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    simpledialog = None

from config import Settings
from models import Event
from store import EventStore, StoreError
from gui_dialogs import BillSummaryWindow, ItemDialog, NewEventDialog
from utils import format_datetime, format_money


class SplitBillApp(ttk.Frame):
    """Main application window"""

    def __init__(self, master: tk.Tk, store: EventStore, settings: Settings):
        super().__init__(master, padding=8)
        self.master = master
        self.master.title("BillSplit")
        self.master.geometry("1000x600")
        self.grid(row=0, column=0, sticky="nsew")
        self.master.rowconfigure(0, weight=1)
        self.master.columnconfigure(0, weight=1)

        self.store = store
        self.settings = settings
        self.current_id: Optional[str] = None

        self._build_menu()
        self._build_ui()
        self.refresh_all()

    # ---------- Menu ----------
    def _build_menu(self):
        """Build application menu bar"""
        menubar = tk.Menu(self.master)
        filem = tk.Menu(menubar, tearoff=0)
        filem.add_command(label="New Event…", command=self.new_event)
        filem.add_command(label="Rename Event…", command=self.rename_event)
        filem.add_command(label="Delete Event", command=self.delete_event)
        filem.add_separator()
        filem.add_command(label="Exit", command=self.master.destroy)
        menubar.add_cascade(label="File", menu=filem)
        self.master.config(menu=menubar)

    # ---------- UI ----------
    def _build_ui(self):
        """Events list on the left, selected event on the right"""
        pane = ttk.PanedWindow(self, orient="horizontal")
        pane.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        left = ttk.Frame(pane, padding=4)
        right = ttk.Frame(pane, padding=4)
        pane.add(left, weight=1)
        pane.add(right, weight=3)

        self._build_events_panel(left)
        self._build_detail_panel(right)

    def _build_events_panel(self, parent):
        parent.columnconfigure(0, weight=1)
        ttk.Label(parent, text="Events").grid(row=0, column=0, sticky="w")
        cols = ("date", "people")
        self.event_tree = ttk.Treeview(parent, columns=cols, height=20)
        self.event_tree.heading("#0", text="name")
        self.event_tree.column("#0", width=140, anchor="w")
        self.event_tree.heading("date", text="date")
        self.event_tree.column("date", width=130, anchor="w")
        self.event_tree.heading("people", text="people")
        self.event_tree.column("people", width=160, anchor="w")
        self.event_tree.grid(row=1, column=0, sticky="nsew", pady=6)
        parent.rowconfigure(1, weight=1)
        self.event_tree.bind("<<TreeviewSelect>>", lambda *_: self._on_select_event())

        ttk.Button(parent, text="Add Event", command=self.new_event).grid(row=2, column=0, sticky="w")

    def _build_detail_panel(self, parent):
        parent.columnconfigure(0, weight=1)

        self.title_var = tk.StringVar(value="No Events - create a new bill splitting event")
        ttk.Label(parent, textvariable=self.title_var, font=("TkDefaultFont", 12, "bold")).grid(
            row=0, column=0, sticky="w")

        self.summary_btn = ttk.Button(parent, text="View Bill Summary", command=self.show_summary)
        self.summary_btn.grid(row=1, column=0, sticky="w", pady=6)

        # People
        people = ttk.LabelFrame(parent, text="People", padding=6)
        people.grid(row=2, column=0, sticky="nsew")
        people.columnconfigure(0, weight=1)
        self.people_list = tk.Listbox(people, height=6)
        self.people_list.grid(row=0, column=0, sticky="nsew")

        controls = ttk.Frame(people)
        controls.grid(row=1, column=0, sticky="ew", pady=(6, 0))
        self.new_person_var = tk.StringVar()
        entry = ttk.Entry(controls, textvariable=self.new_person_var, width=18)
        entry.pack(side="left")
        entry.bind("<Return>", lambda *_: self.add_person())
        ttk.Button(controls, text="Add Person", command=self.add_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Rename", command=self.rename_selected_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Remove", command=self.remove_selected_person).pack(side="left", padx=4)

        # Items
        items = ttk.LabelFrame(parent, text="Items", padding=6)
        items.grid(row=3, column=0, sticky="nsew", pady=(8, 0))
        parent.rowconfigure(3, weight=1)
        items.columnconfigure(0, weight=1)
        items.rowconfigure(1, weight=1)

        top = ttk.Frame(items)
        top.grid(row=0, column=0, sticky="ew")
        ttk.Button(top, text="Add Item", command=self.add_item).pack(side="left", padx=3)
        ttk.Button(top, text="Edit", command=self.edit_selected_item).pack(side="left", padx=3)
        ttk.Button(top, text="Delete", command=self.delete_selected_item).pack(side="left", padx=3)

        cols = ("item", "qty", "price", "shared_by")
        self.item_tree = ttk.Treeview(items, columns=cols, show="headings", height=10)
        for c, w in zip(cols, [180, 50, 90, 300]):
            self.item_tree.heading(c, text=c)
            self.item_tree.column(c, width=w, anchor="w")
        self.item_tree.grid(row=1, column=0, sticky="nsew", pady=6)
        self.item_tree.bind("<Double-1>", lambda *_: self.edit_selected_item())

        yscroll = ttk.Scrollbar(items, orient="vertical", command=self.item_tree.yview)
        self.item_tree.configure(yscroll=yscroll.set)
        yscroll.grid(row=1, column=1, sticky="ns")

    # ---------- Helpers ----------
    def _event(self) -> Optional[Event]:
        if self.current_id is None:
            return None
        try:
            return self.store.get_event(self.current_id)
        except StoreError:
            self.current_id = None
            return None

    def _require_event(self) -> Optional[Event]:
        e = self._event()
        if e is None:
            messagebox.showinfo("BillSplit", "Select or create an event first.")
        return e

    def _on_select_event(self):
        sel = self.event_tree.selection()
        if sel and sel[0] != self.current_id:
            self.current_id = sel[0]
            self.refresh_detail()

    # ---------- CRUD: Events ----------
    def new_event(self):
        """Create event and open it"""
        dlg = NewEventDialog(self.master, self.store)
        self.master.wait_window(dlg)
        if dlg.result:
            self.current_id = dlg.result.id
            self.refresh_all()

    def rename_event(self):
        e = self._require_event()
        if e is None:
            return
        name = simpledialog.askstring("Rename Event", "Name", initialvalue=e.name, parent=self.master)
        if name is None:
            return
        try:
            self.store.rename_event(e.id, name)
        except StoreError as ex:
            messagebox.showerror("Rename Event", str(ex))
            return
        self.refresh_all()

    def delete_event(self):
        e = self._require_event()
        if e is None:
            return
        if messagebox.askyesno("Delete", f"Delete event '{e.name}'?"):
            self.store.delete_event(e.id)
            self.current_id = None
            self.refresh_all()

    # ---------- CRUD: People ----------
    def add_person(self):
        """Add new person"""
        e = self._require_event()
        if e is None:
            return
        name = self.new_person_var.get().strip()
        if not name:
            return
        try:
            self.store.add_person(e.id, name)
        except StoreError as ex:
            messagebox.showerror("Duplicate Name", str(ex))
            return
        self.new_person_var.set("")
        self.refresh_all()

    def _selected_person_id(self) -> Optional[str]:
        e = self._event()
        sel = self.people_list.curselection()
        if e is None or not sel:
            return None
        return e.people[sel[0]].id

    def rename_selected_person(self):
        e = self._event()
        pid = self._selected_person_id()
        if pid is None:
            return
        p = e.find_person(pid)
        name = simpledialog.askstring("Edit Person", "Name", initialvalue=p.name, parent=self.master)
        if name is None:
            return
        try:
            self.store.rename_person(e.id, pid, name)
        except StoreError as ex:
            messagebox.showerror("Edit Person", str(ex))
            return
        self.refresh_all()

    def remove_selected_person(self):
        """Remove selected person along with the items they share"""
        e = self._event()
        pid = self._selected_person_id()
        if pid is None:
            return
        p = e.find_person(pid)
        n = sum(1 for i in e.items if pid in i.shared_by)
        msg = f"Remove '{p.name}'?"
        if n:
            msg += f" {n} item(s) shared by {p.name} will be removed too."
        if messagebox.askyesno("Remove person", msg):
            self.store.remove_person(e.id, pid)
            self.refresh_all()

    # ---------- CRUD: Items ----------
    def add_item(self):
        e = self._require_event()
        if e is None:
            return
        dlg = ItemDialog(self.master, self.store, e, None)
        self.master.wait_window(dlg)
        if dlg.result:
            self.refresh_all()

    def edit_selected_item(self):
        e = self._event()
        sel = self.item_tree.selection()
        if e is None or not sel:
            messagebox.showinfo("Edit", "Select an item row first.")
            return
        item = e.find_item(sel[0])
        if item is None:
            return
        dlg = ItemDialog(self.master, self.store, e, item)
        self.master.wait_window(dlg)
        if dlg.result:
            self.refresh_all()

    def delete_selected_item(self):
        e = self._event()
        sel = self.item_tree.selection()
        if e is None or not sel:
            messagebox.showinfo("Delete", "Select an item row first.")
            return
        if messagebox.askyesno("Delete", "Delete selected item?"):
            self.store.remove_item(e.id, sel[0])
            self.refresh_all()

    def show_summary(self):
        e = self._require_event()
        if e is None or not e.items:
            return
        BillSummaryWindow(self.master, e, self.settings)

    # ---------- Refresh ----------
    def refresh_all(self):
        """Refresh all UI elements"""
        self.refresh_events()
        self.refresh_detail()

    def refresh_events(self):
        for iid in self.event_tree.get_children():
            self.event_tree.delete(iid)
        for e in self.store.list_events():
            self.event_tree.insert("", "end", iid=e.id, text=e.name, values=(
                format_datetime(e.date),
                ", ".join(p.name for p in e.people),
            ))
        if self.current_id and self.event_tree.exists(self.current_id):
            self.event_tree.selection_set(self.current_id)

    def refresh_detail(self):
        """Refresh people and items of the selected event"""
        self.people_list.delete(0, tk.END)
        for iid in self.item_tree.get_children():
            self.item_tree.delete(iid)

        e = self._event()
        if e is None:
            self.title_var.set("No event selected")
            self.summary_btn.state(["disabled"])
            return

        self.title_var.set(e.name)
        for i, p in enumerate(e.people):
            self.people_list.insert(tk.END, p.name)
            if p.color:
                self.people_list.itemconfig(i, foreground=p.color)

        names = {p.id: p.name for p in e.people}
        for item in e.items:
            shared = ", ".join(names[pid] for pid in item.shared_by if pid in names)
            self.item_tree.insert("", "end", iid=item.id, values=(
                item.name, item.quantity, format_money(item.price), shared or "(nobody)"
            ))

        if e.items:
            self.summary_btn.state(["!disabled"])
        else:
            self.summary_btn.state(["disabled"])
