# conversor/ui/app.py
import sys
import traceback
import webbrowser
import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Dict, Optional

import customtkinter as ctk
from PIL import ImageTk

# IMPORTAÇÕES LOCAIS
from conversor.config import (APP_TITLE, CURRENT_VERSION, DEFAULT_CATEGORY,
                              UNITS_BY_CATEGORY, resource_path)
from conversor.core.presenter import ConversionPresenter, default_selection, format_number, parse_value
from conversor.core.table import InvalidRangeError, build_table, export_csv
from conversor.core.units import UnitConverter, default_converter
from conversor.updates import fetch_latest_release, is_newer


class ToolTip:
    """
    Cria um tooltip (texto flutuante) para qualquer widget ctk/tk.
    """
    def __init__(self, widget, text):
        self.widget = widget
        self.text = text
        self.tip_window = None
        self.id = None

        self.widget.bind("<Enter>", self.schedule_show)
        self.widget.bind("<Leave>", self.hide_tip)
        self.widget.bind("<ButtonPress>", self.hide_tip)

    def schedule_show(self, event=None):
        self.unschedule()
        # Pequeno delay para não ficar piscando se passar o mouse rápido
        self.id = self.widget.after(500, self.show_tip)

    def unschedule(self):
        after_id, self.id = self.id, None
        if after_id:
            self.widget.after_cancel(after_id)

    def show_tip(self, event=None):
        x = self.widget.winfo_rootx() + 25
        y = self.widget.winfo_rooty() + 35

        self.tip_window = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{x}+{y}")

        label = tk.Label(tw, text=self.text, justify='left',
                         background="#1A1A1A", fg="#E0E0E0",
                         relief='solid', borderwidth=1,
                         font=("Arial", 9, "normal"))
        label.pack(ipadx=5, ipady=2)

    def hide_tip(self, event=None):
        self.unschedule()
        tw, self.tip_window = self.tip_window, None
        if tw:
            tw.destroy()


class App(ctk.CTk):
    COLOR_OK_TEXT = "white"
    COLOR_UNAVAILABLE_TEXT = "#E74C3C"
    COLOR_SNACKBAR = "#323232"

    SNACKBAR_MS = 2500

    def __init__(self, converter: Optional[UnitConverter] = None):
        super().__init__()

        self.converter = converter or default_converter()
        self.presenter = ConversionPresenter(self.converter)
        self.current_category = DEFAULT_CATEGORY
        self._snackbar_job = None
        self._last_available = True

        try:
            self.app_icon_image = ImageTk.PhotoImage(file=resource_path("icon.ico"))
            self.wm_iconphoto(True, self.app_icon_image)
        except (OSError, tk.TclError):
            pass  # Sem ícone, segue com o padrão do sistema

        self.title(f"{APP_TITLE} {CURRENT_VERSION}")
        self.geometry("520x560")
        self.protocol("WM_DELETE_WINDOW", self.on_closing)

        # Row 0: Menu Bar / Row 1: Conteúdo / Row 2: Snackbar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=0)
        self.grid_rowconfigure(1, weight=1)

        self._create_menubar()
        self._create_main_area()
        self._create_snackbar()

        # Inicialização por defecto (Longitud)
        self.update_spinners(self.current_category)

        self.after(2000, self.check_for_updates)

        self.bind('<Control-t>', lambda event: self.open_conversion_table())
        self.bind('<Control-i>', lambda event: self.swap_units())

    # ------------------------------------------------------------------ layout

    def _create_menubar(self):
        self.menubar_frame = ctk.CTkFrame(self, height=28, corner_radius=0, fg_color="#1e1e1e")
        self.menubar_frame.grid(row=0, column=0, sticky="ew")

        menu_btn_config = {
            "width": 50,
            "height": 28,
            "fg_color": "transparent",
            "hover_color": "#3a3a3a",
            "font": ctk.CTkFont(size=12),
            "anchor": "w"
        }

        self.btn_menu_tools = ctk.CTkButton(self.menubar_frame, text="Tools", command=self._post_tools_menu, **menu_btn_config)
        self.btn_menu_tools.pack(side="left", padx=2)

        self.btn_menu_help = ctk.CTkButton(self.menubar_frame, text="Help", command=self._post_help_menu, **menu_btn_config)
        self.btn_menu_help.pack(side="left", padx=2)

    def _popup_menu(self, button, entries):
        menu = tk.Menu(self, tearoff=0, bg="#2b2b2b", fg="white", activebackground="#404040", activeforeground="white", borderwidth=0)
        for label, command in entries:
            menu.add_command(label=f"    {label}", command=command)

        try:
            x = button.winfo_rootx()
            y = button.winfo_rooty() + button.winfo_height()
            menu.tk_popup(x, y)
        finally:
            menu.grab_release()

    def _post_tools_menu(self):
        self._popup_menu(self.btn_menu_tools, [
            ("Conversion Table...   (Ctrl+T)", self.open_conversion_table),
            ("Swap Units            (Ctrl+I)", self.swap_units),
        ])

    def _post_help_menu(self):
        self._popup_menu(self.btn_menu_help, [
            ("Check for Updates", lambda: self.check_for_updates(notify_if_current=True)),
            ("About", self.show_about),
        ])

    def _create_main_area(self):
        self.main_frame = ctk.CTkFrame(self, fg_color="transparent")
        self.main_frame.grid(row=1, column=0, sticky="nsew", padx=20, pady=10)

        ctk.CTkLabel(self.main_frame, text=APP_TITLE,
                     font=ctk.CTkFont(size=22, weight="bold")).pack(pady=(10, 15))

        # --- CATEGORIAS (chips) ---
        self.category_chips = ctk.CTkSegmentedButton(self.main_frame, values=list(UNITS_BY_CATEGORY.keys()),
                                                     command=self.on_category_selected)
        self.category_chips.set(self.current_category)
        self.category_chips.pack(fill="x", pady=(0, 15))

        # --- ENTRADA ---
        input_card = ctk.CTkFrame(self.main_frame, corner_radius=8)
        input_card.pack(fill="x", pady=5)

        row = ctk.CTkFrame(input_card, fg_color="transparent")
        row.pack(fill="x", padx=15, pady=(12, 5))

        self.input_var = ctk.StringVar(value="")
        # Conversão em tempo real (equivalente ao TextWatcher)
        self.input_var.trace_add("write", lambda *_: self.calculate_conversion())

        self.input_value = ctk.CTkEntry(row, textvariable=self.input_var, placeholder_text="0",
                                        font=ctk.CTkFont(size=18))
        self.input_value.pack(side="left", fill="x", expand=True)

        self.lbl_input_badge = ctk.CTkLabel(row, text="", width=110, corner_radius=6,
                                            fg_color="#3a3a3a", font=ctk.CTkFont(size=12, weight="bold"))
        self.lbl_input_badge.pack(side="left", padx=(10, 0))

        # --- SELETORES DE UNIDADE ---
        units_row = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        units_row.pack(fill="x", pady=10)
        units_row.grid_columnconfigure(0, weight=1)
        units_row.grid_columnconfigure(2, weight=1)

        self.spinner_from = ctk.CTkOptionMenu(units_row, values=[""], command=self.on_unit_selected)
        self.spinner_from.grid(row=0, column=0, sticky="ew")

        self.btn_swap = ctk.CTkButton(units_row, text="⇄", width=40, command=self.swap_units)
        self.btn_swap.grid(row=0, column=1, padx=10)
        ToolTip(self.btn_swap, "Swap units (Ctrl+I)")

        self.spinner_to = ctk.CTkOptionMenu(units_row, values=[""], command=self.on_unit_selected)
        self.spinner_to.grid(row=0, column=2, sticky="ew")

        # --- RESULTADO ---
        result_card = ctk.CTkFrame(self.main_frame, corner_radius=8, fg_color="#2B2B2B")
        result_card.pack(fill="x", pady=(10, 5))

        res_row = ctk.CTkFrame(result_card, fg_color="transparent")
        res_row.pack(fill="x", padx=15, pady=(15, 5))

        self.txt_result = ctk.CTkLabel(res_row, text=format_number(0.0, 2),
                                       font=ctk.CTkFont(size=34, weight="bold"), anchor="w")
        self.txt_result.pack(side="left", fill="x", expand=True)

        self.lbl_result_unit = ctk.CTkLabel(res_row, text="", font=ctk.CTkFont(size=14), text_color="gray")
        self.lbl_result_unit.pack(side="right")

        self.lbl_conversion_detail = ctk.CTkLabel(result_card, text="", font=ctk.CTkFont(size=12),
                                                  text_color="gray", anchor="w", wraplength=440)
        self.lbl_conversion_detail.pack(fill="x", padx=15, pady=(0, 15))

        self.btn_table = ctk.CTkButton(self.main_frame, text="Conversion Table", command=self.open_conversion_table,
                                       fg_color="transparent", border_width=1, border_color="#666",
                                       hover_color="#444", text_color="#DDD")
        self.btn_table.pack(pady=(15, 0))
        ToolTip(self.btn_table, "Equivalence table for the selected units (Ctrl+T)")

    def _create_snackbar(self):
        self.snackbar = ctk.CTkLabel(self, text="", height=36, corner_radius=6,
                                     fg_color=self.COLOR_SNACKBAR, text_color="white")

    # ------------------------------------------------------------------ estado

    def on_category_selected(self, category: str):
        print(f"--- CATEGORIA: {category} ---")
        self.update_spinners(category)

    def update_spinners(self, category: str):
        units = UNITS_BY_CATEGORY.get(category)
        if not units:
            return

        self.current_category = category
        from_idx, to_idx = default_selection(units)

        self.spinner_from.configure(values=list(units))
        self.spinner_to.configure(values=list(units))
        self.spinner_from.set(units[from_idx])
        self.spinner_to.set(units[to_idx])

        # CTkOptionMenu.set() não dispara o callback
        self.on_unit_selected()

    def on_unit_selected(self, _choice=None):
        self.calculate_conversion()
        self.update_badges()

    def update_badges(self):
        self.lbl_input_badge.configure(text=self.spinner_from.get())
        self.lbl_result_unit.configure(text=self.spinner_to.get())

    def swap_units(self):
        from_unit, to_unit = self.spinner_from.get(), self.spinner_to.get()
        self.spinner_from.set(to_unit)
        self.spinner_to.set(from_unit)
        self.on_unit_selected()

    def calculate_conversion(self):
        try:
            state = self.presenter.present(self.input_var.get(), self.spinner_from.get(), self.spinner_to.get())
        except Exception:
            traceback.print_exc()
            return

        self.txt_result.configure(text=state.result_text,
                                  text_color=self.COLOR_OK_TEXT if state.available else self.COLOR_UNAVAILABLE_TEXT)
        self.lbl_conversion_detail.configure(text=state.detail_text)

        # Só avisa na transição para "indisponível", não a cada tecla
        if not state.available and self._last_available:
            self.show_snackbar(state.detail_text)
        self._last_available = state.available

    def show_snackbar(self, message: str):
        if self._snackbar_job:
            self.after_cancel(self._snackbar_job)

        self.snackbar.configure(text=f"  {message}  ")
        self.snackbar.grid(row=2, column=0, sticky="ew", padx=20, pady=(0, 15))
        self._snackbar_job = self.after(self.SNACKBAR_MS, self._hide_snackbar)

    def _hide_snackbar(self):
        self._snackbar_job = None
        self.snackbar.grid_remove()

    # ------------------------------------------------------------------ ferramentas

    def open_conversion_table(self):
        from_unit, to_unit = self.spinner_from.get(), self.spinner_to.get()

        win = ctk.CTkToplevel(self)
        win.title("Conversion Table")
        win.geometry("420x520")
        win.attributes('-topmost', True)

        ctk.CTkLabel(win, text=f"{from_unit}  →  {to_unit}", font=("Arial", 16, "bold")).pack(pady=(15, 5))

        range_row = ctk.CTkFrame(win, fg_color="transparent")
        range_row.pack(fill="x", padx=20, pady=5)

        fields: Dict[str, ctk.CTkEntry] = {}
        for key, label, default in (("start", "From", "1"), ("stop", "To", "10"), ("steps", "Steps", "10")):
            ctk.CTkLabel(range_row, text=label).pack(side="left", padx=(0, 4))
            entry = ctk.CTkEntry(range_row, width=60)
            entry.insert(0, default)
            entry.pack(side="left", padx=(0, 10))
            fields[key] = entry

        body = ctk.CTkScrollableFrame(win)
        body.pack(fill="both", expand=True, padx=20, pady=10)

        current = {"table": None}

        def refresh():
            for widget in body.winfo_children():
                widget.destroy()

            start = parse_value(fields["start"].get())
            stop = parse_value(fields["stop"].get())
            steps = parse_value(fields["steps"].get())
            if start is None or stop is None or steps is None:
                messagebox.showerror("Input Error", "Please check your numbers.", parent=win)
                return
            if not steps.is_integer():
                messagebox.showerror("Input Error", "Steps must be a whole number.", parent=win)
                return
            steps = int(steps)

            try:
                table = build_table(self.converter, from_unit, to_unit, start, stop, steps)
            except InvalidRangeError as e:
                messagebox.showerror("Input Error", str(e), parent=win)
                return

            current["table"] = table
            if table is None:
                ctk.CTkLabel(body, text="Conversión no disponible", text_color=self.COLOR_UNAVAILABLE_TEXT).grid(row=0, column=0, columnspan=2, pady=10)
                return

            for i, h in enumerate((from_unit, to_unit)):
                ctk.CTkLabel(body, text=h, font=("Arial", 12, "bold")).grid(row=0, column=i, padx=25, pady=5)
            for r_idx, (value, result) in enumerate(table.rows(), start=1):
                ctk.CTkLabel(body, text=format_number(value, 2)).grid(row=r_idx, column=0, padx=25, pady=2)
                ctk.CTkLabel(body, text=format_number(result, 4)).grid(row=r_idx, column=1, padx=25, pady=2)

        def export():
            table = current["table"]
            if table is None:
                return

            file_path = filedialog.asksaveasfilename(parent=win, defaultextension=".csv",
                                                     filetypes=[("CSV", "*.csv"), ("All Files", "*.*")])
            if not file_path:
                return

            use_dot = messagebox.askyesno(
                "Decimal Format",
                "Use DOT (.) as decimal separator?\n\n"
                "Yes = International Standard (13.5)\n"
                "No = Excel ES/BR Standard (13,5)",
                parent=win
            )
            try:
                export_csv(table, file_path, use_dot)
                messagebox.showinfo("Export Success", "CSV exported successfully!", parent=win)
            except PermissionError:
                messagebox.showerror("Export Error", "File is open in another program.\nPlease close it and try again.", parent=win)
            except OSError as e:
                messagebox.showerror("Export Error", str(e), parent=win)

        actions = ctk.CTkFrame(win, fg_color="transparent")
        actions.pack(fill="x", padx=20, pady=(0, 15))
        ctk.CTkButton(actions, text="Refresh", command=refresh, width=120).pack(side="left")
        ctk.CTkButton(actions, text="Export CSV...", command=export, width=120, fg_color="#27AE60").pack(side="right")

        refresh()

    def show_about(self):
        units = self.converter.list_units()
        messagebox.showinfo(
            "About",
            f"{APP_TITLE} {CURRENT_VERSION}\n\n"
            f"{len(units)} units, {len(self.converter)} direct conversions."
        )

    def on_closing(self):
        self.quit()
        self.destroy()
        sys.exit(0)

    def check_for_updates(self, notify_if_current: bool = False):
        latest = fetch_latest_release()
        if latest is None:
            if notify_if_current:
                messagebox.showwarning("Update Check", "Could not reach the update server.")
            return

        latest_tag, html_url = latest
        if is_newer(latest_tag, CURRENT_VERSION):
            msg = (f"New version {latest_tag} is available!\n"
                   f"Current version: {CURRENT_VERSION}\n\n"
                   f"Do you want to download it now?")
            if messagebox.askyesno("Update Available", msg):
                webbrowser.open(html_url)
                self.on_closing()
        else:
            print(f"Up to date ({CURRENT_VERSION}).")
            if notify_if_current:
                messagebox.showinfo("Update Check", f"You are running the latest version ({CURRENT_VERSION}).")
