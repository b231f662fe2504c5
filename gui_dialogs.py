"""
Dialog windows for BillSplit GUI
"""
from __future__ import annotations
from typing import Dict, List, Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, filedialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    filedialog = None

from config import Settings
from models import Event, Item
from store import EventStore, StoreError, MAX_QUANTITY
from computations import compute_event_bill, item_breakdown
from excel_export import export_bill_excel
from utils import format_money, safe_float, safe_int


class NewEventDialog(tk.Toplevel):
    """Dialog for creating an event with its people"""

    def __init__(self, master, store: EventStore):
        super().__init__(master)
        self.title("New Event")
        self.resizable(False, False)
        self.store = store
        self.people: List[str] = []
        self.result: Optional[Event] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.v_name = tk.StringVar()
        ttk.Label(frm, text="Event Name").grid(row=0, column=0, sticky="w")
        ttk.Entry(frm, textvariable=self.v_name, width=28).grid(row=0, column=1, sticky="w")

        ttk.Label(frm, text="People").grid(row=1, column=0, sticky="nw", pady=(8, 0))
        self.people_list = tk.Listbox(frm, height=8)
        self.people_list.grid(row=1, column=1, sticky="ew", pady=(8, 0))

        row = ttk.Frame(frm)
        row.grid(row=2, column=1, sticky="ew", pady=4)
        self.v_person = tk.StringVar()
        entry = ttk.Entry(row, textvariable=self.v_person, width=18)
        entry.pack(side="left")
        entry.bind("<Return>", lambda *_: self._add_person())
        ttk.Button(row, text="Add", command=self._add_person).pack(side="left", padx=4)
        ttk.Button(row, text="Remove", command=self._remove_person).pack(side="left")

        btns = ttk.Frame(frm)
        btns.grid(row=3, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="Create", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self.grab_set()
        self.transient(master)

    def _add_person(self):
        """Add typed name to the list, rejecting duplicates"""
        name = self.v_person.get().strip()
        if not name:
            return
        if any(p.lower() == name.lower() for p in self.people):
            messagebox.showerror("Duplicate Name", f"'{name}' already exists", parent=self)
            return
        self.people.append(name)
        self.people_list.insert(tk.END, name)
        self.v_person.set("")

    def _remove_person(self):
        sel = self.people_list.curselection()
        if not sel:
            return
        self.people.pop(sel[0])
        self.people_list.delete(sel[0])

    def _ok(self):
        """Validate and create the event"""
        try:
            self.result = self.store.create_event(self.v_name.get(), self.people)
        except StoreError as ex:
            messagebox.showerror("New Event", str(ex), parent=self)
            return
        self.destroy()

    def _cancel(self):
        self.result = None
        self.destroy()


class ItemDialog(tk.Toplevel):
    """Dialog for adding/editing an item and who shares it"""

    def __init__(self, master, store: EventStore, event: Event, item: Optional[Item] = None):
        super().__init__(master)
        self.title("New Item" if item is None else "Edit Item")
        self.resizable(False, False)
        self.store = store
        self.event = event
        self.item = item
        self.result: Optional[Item] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.v_name = tk.StringVar(value=item.name if item else "")
        # new items take a unit price and quantity; edits change the total price
        self.v_price = tk.StringVar(value=f"{item.price:.2f}" if item else "")
        self.v_qty = tk.StringVar(value="1")
        self.v_total = tk.StringVar(value="")

        r = 0
        ttk.Label(frm, text="Item Name").grid(row=r, column=0, sticky="w")
        ttk.Entry(frm, textvariable=self.v_name, width=28).grid(row=r, column=1, sticky="w")
        r += 1

        ttk.Label(frm, text="Price" if item else "Price (per item)").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_price, width=12).grid(row=r, column=1, sticky="w")
        r += 1

        if item is None:
            ttk.Label(frm, text="Quantity").grid(row=r, column=0, sticky="w", pady=2)
            ttk.Spinbox(frm, from_=1, to=MAX_QUANTITY, textvariable=self.v_qty, width=6,
                        state="readonly").grid(row=r, column=1, sticky="w")
            r += 1
            ttk.Label(frm, textvariable=self.v_total).grid(row=r, column=0, columnspan=2, sticky="w")
            r += 1
            self.v_price.trace_add("write", lambda *_: self._update_total())
            self.v_qty.trace_add("write", lambda *_: self._update_total())

        ttk.Separator(frm, orient="horizontal").grid(row=r, column=0, columnspan=2, sticky="ew", pady=6)
        r += 1
        ttk.Label(frm, text="Shared By").grid(row=r, column=0, sticky="w")
        r += 1

        selected = set(item.shared_by) if item else set()
        self.v_all = tk.BooleanVar(value=bool(event.people) and len(selected) == len(event.people))
        ttk.Checkbutton(frm, text="Select All", variable=self.v_all, command=self._toggle_all).grid(
            row=r, column=0, columnspan=2, sticky="w")
        r += 1

        self.v_people: Dict[str, tk.BooleanVar] = {}
        for p in event.people:
            v = tk.BooleanVar(value=p.id in selected)
            self.v_people[p.id] = v
            ttk.Checkbutton(frm, text=p.name, variable=v, command=self._sync_all).grid(
                row=r, column=0, columnspan=2, sticky="w", padx=(16, 0))
            r += 1

        btns = ttk.Frame(frm)
        btns.grid(row=r, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="Add" if item is None else "Save", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self.bind("<Return>", lambda *_: self._ok())
        self.bind("<KP_Enter>", lambda *_: self._ok())
        self._update_total()
        self.grab_set()
        self.transient(master)

    def _update_total(self):
        """Show total price when more than one unit is ordered"""
        qty = safe_int(self.v_qty.get(), 1)
        price = safe_float(self.v_price.get(), None)
        if qty > 1 and price is not None:
            self.v_total.set(f"Total Price: {format_money(price * qty)}")
        else:
            self.v_total.set("")

    def _toggle_all(self):
        on = self.v_all.get()
        for v in self.v_people.values():
            v.set(on)

    def _sync_all(self):
        self.v_all.set(all(v.get() for v in self.v_people.values()))

    def _ok(self):
        """Validate and save item"""
        shared = [pid for pid, v in self.v_people.items() if v.get()]
        try:
            if self.item is None:
                self.result = self.store.add_item(
                    self.event.id, self.v_name.get(), self.v_price.get(), self.v_qty.get(), shared
                )
            else:
                self.result = self.store.update_item(
                    self.event.id, self.item.id, name=self.v_name.get(), price=self.v_price.get(), shared_by=shared
                )
        except StoreError as ex:
            messagebox.showerror("Invalid item", str(ex), parent=self)
            return
        self.destroy()

    def _cancel(self):
        self.result = None
        self.destroy()


class BillSummaryWindow(tk.Toplevel):
    """Bill summary with tax and tip sliders"""

    def __init__(self, master, event: Event, settings: Settings):
        super().__init__(master)
        self.title(f"Bill Summary - {event.name}")
        self.geometry("640x640")
        self.event = event
        self.settings = settings

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)
        frm.columnconfigure(1, weight=1)

        self.v_tax = tk.DoubleVar(value=settings.default_tax_rate)
        self.v_tip = tk.DoubleVar(value=settings.default_tip_rate)
        self.v_subtotal = tk.StringVar()
        self.v_tax_amt = tk.StringVar()
        self.v_tip_amt = tk.StringVar()
        self.v_tax_lbl = tk.StringVar()
        self.v_tip_lbl = tk.StringVar()
        self.v_total = tk.StringVar()
        self.v_warning = tk.StringVar()

        r = 0
        ttk.Label(frm, text="Subtotal").grid(row=r, column=0, sticky="w")
        ttk.Label(frm, textvariable=self.v_subtotal, font=("TkDefaultFont", 10, "bold")).grid(
            row=r, column=2, sticky="e")
        r += 1

        ttk.Label(frm, text="Sales Tax").grid(row=r, column=0, sticky="w")
        ttk.Scale(frm, from_=settings.tax_min, to=settings.tax_max, variable=self.v_tax,
                  command=lambda *_: self._on_slide()).grid(row=r, column=1, sticky="ew", padx=8)
        ttk.Label(frm, textvariable=self.v_tax_amt).grid(row=r, column=2, sticky="e")
        r += 1
        ttk.Label(frm, textvariable=self.v_tax_lbl, foreground="gray").grid(row=r, column=1)
        r += 1

        ttk.Label(frm, text="Tip").grid(row=r, column=0, sticky="w")
        ttk.Scale(frm, from_=settings.tip_min, to=settings.tip_max, variable=self.v_tip,
                  command=lambda *_: self._on_slide()).grid(row=r, column=1, sticky="ew", padx=8)
        ttk.Label(frm, textvariable=self.v_tip_amt).grid(row=r, column=2, sticky="e")
        r += 1
        ttk.Label(frm, textvariable=self.v_tip_lbl, foreground="gray").grid(row=r, column=1)
        r += 1

        ttk.Label(frm, text="Total with Tax & Tip").grid(row=r, column=0, sticky="w")
        ttk.Label(frm, textvariable=self.v_total, font=("TkDefaultFont", 10, "bold")).grid(
            row=r, column=2, sticky="e")
        r += 1

        ttk.Label(frm, textvariable=self.v_warning, foreground="#c00000").grid(
            row=r, column=0, columnspan=3, sticky="w", pady=(4, 0))
        r += 1

        ttk.Label(frm, text="Individual Totals").grid(row=r, column=0, sticky="w", pady=(10, 0))
        r += 1
        cols = ("subtotal", "tax", "tip", "total")
        self.people_tree = ttk.Treeview(frm, columns=cols, height=8)
        self.people_tree.heading("#0", text="person / item")
        self.people_tree.column("#0", width=220, anchor="w")
        for c in cols:
            self.people_tree.heading(c, text=c)
            self.people_tree.column(c, width=90, anchor="e")
        self.people_tree.grid(row=r, column=0, columnspan=3, sticky="nsew")
        frm.rowconfigure(r, weight=1)
        r += 1

        ttk.Label(frm, text="Items Breakdown").grid(row=r, column=0, sticky="w", pady=(10, 0))
        r += 1
        icols = ("item", "price", "per_person", "split_between")
        self.items_tree = ttk.Treeview(frm, columns=icols, show="headings", height=6)
        for c, w in zip(icols, [160, 90, 90, 240]):
            self.items_tree.heading(c, text=c)
            self.items_tree.column(c, width=w, anchor="w")
        self.items_tree.grid(row=r, column=0, columnspan=3, sticky="nsew")
        frm.rowconfigure(r, weight=1)
        r += 1

        btns = ttk.Frame(frm)
        btns.grid(row=r, column=0, columnspan=3, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="Export Excel…", command=self._export).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Done", command=self.destroy).grid(row=0, column=1, padx=4)

        self.refresh()
        self.grab_set()
        self.transient(master)

    def _on_slide(self):
        """Snap slider values onto their step grid, then recompute"""
        tax = self.settings.clamp_tax(self.v_tax.get())
        tip = self.settings.clamp_tip(self.v_tip.get())
        if tax != self.v_tax.get():
            self.v_tax.set(tax)
        if tip != self.v_tip.get():
            self.v_tip.set(tip)
        self.refresh()

    def refresh(self):
        """Recompute the bill at current rates"""
        tax_rate = self.v_tax.get()
        tip_rate = self.v_tip.get()
        bill = compute_event_bill(self.event, tax_rate, tip_rate)
        s = bill.summary
        self.v_subtotal.set(format_money(s.subtotal))
        self.v_tax_amt.set(format_money(s.tax_amount))
        self.v_tip_amt.set(format_money(s.tip_amount))
        self.v_total.set(format_money(s.total))
        self.v_tax_lbl.set(f"{tax_rate:.3f}%")
        self.v_tip_lbl.set(f"{int(tip_rate)}%")
        if bill.unassigned_items:
            self.v_warning.set(
                f"Not shared by anyone: {', '.join(i.name for i in bill.unassigned_items)} "
                f"({format_money(bill.unassigned_total)} missing from individual totals)"
            )
        else:
            self.v_warning.set("")

        self._fill_items()

        open_ids = {iid for iid in self.people_tree.get_children() if self.people_tree.item(iid, "open")}
        for iid in self.people_tree.get_children():
            self.people_tree.delete(iid)
        for b in bill.people:
            self.people_tree.insert("", "end", iid=b.person.id, text=b.person.name,
                                    open=b.person.id in open_ids,
                                    values=(format_money(b.subtotal), f"+{format_money(b.tax)}",
                                            f"+{format_money(b.tip)}", format_money(b.total)))
            for share in b.items:
                label = f"• {share.item.name}"
                if share.item.quantity > 1:
                    label += f" ×{share.item.quantity}"
                self.people_tree.insert(b.person.id, "end", text=label,
                                        values=(format_money(share.amount), "", "", ""))

    def _fill_items(self):
        """Rebuild the items breakdown from the live event"""
        for iid in self.items_tree.get_children():
            self.items_tree.delete(iid)
        for item, share, sharers in item_breakdown(self.event):
            label = item.name
            if item.quantity > 1:
                label += f" ×{item.quantity} ({format_money(item.unit_price)} each)"
            per_person = format_money(share) if share is not None else "—"
            self.items_tree.insert("", "end", values=(label, format_money(item.price), per_person, ", ".join(sharers)))

    def _export(self):
        """Export the bill at current rates to Excel"""
        fp = filedialog.asksaveasfilename(
            parent=self,
            title="Export Excel",
            defaultextension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx")]
        )
        if not fp:
            return
        try:
            export_bill_excel(self.event, fp, self.v_tax.get(), self.v_tip.get())
            messagebox.showinfo("Export", f"Exported: {fp}", parent=self)
        except OSError as ex:
            messagebox.showerror("Export failed", str(ex), parent=self)
