"""
Workbook palette: colors, fonts, fills, borders and alignments used by exports.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
STUDIO_BLUE = "1F4E79"
MID_BLUE = "2E75B6"
PALE_BLUE = "DDEBF7"
ALTERNATE_ROW = "F5F5F5"
WHITE = "FFFFFF"
BLACK = "000000"
LIGHT_GOLD = "FFF8DC"
TOTAL_ROW_BG = "E3F2FD"
GRAY_666 = "666666"
GRID_GRAY = "CCCCCC"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=20, bold=True, color=STUDIO_BLUE)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY_666)
SECTION_FONT = Font(name="Calibri", size=13, bold=True, color=STUDIO_BLUE)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=BLACK)
KPI_VALUE_FONT = Font(name="Calibri", size=22, bold=True, color=MID_BLUE)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY_666)
NOTE_FONT = Font(name="Calibri", size=10, italic=True, color=GRAY_666)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=STUDIO_BLUE, end_color=STUDIO_BLUE, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=TOTAL_ROW_BG, end_color=TOTAL_ROW_BG, fill_type="solid")
GOLD_FILL = PatternFill(start_color=LIGHT_GOLD, end_color=LIGHT_GOLD, fill_type="solid")
EXPANDED_FILL = PatternFill(start_color=PALE_BLUE, end_color=PALE_BLUE, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color=GRID_GRAY),
    right=Side(style="thin", color=GRID_GRAY),
    top=Side(style="thin", color=GRID_GRAY),
    bottom=Side(style="thin", color=GRID_GRAY),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=STUDIO_BLUE),
    right=Side(style="thin", color=STUDIO_BLUE),
    top=Side(style="thin", color=STUDIO_BLUE),
    bottom=Side(style="medium", color=STUDIO_BLUE),
)
TOTAL_BORDER = Border(
    left=Side(style="thin", color="999999"),
    right=Side(style="thin", color="999999"),
    top=Side(style="medium", color="999999"),
    bottom=Side(style="medium", color="999999"),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
WRAP = Alignment(horizontal="left", vertical="center", wrap_text=True)

# ---------------------------------------------------------------------------
# Highlight name -> fill mapping
# ---------------------------------------------------------------------------
HIGHLIGHT_FILLS = {
    "gold": GOLD_FILL,
    "expanded": EXPANDED_FILL,
}
