"""
spreadsheet.py
--------------
描述：Excel 名單匯入、範本下載、得獎名單匯出 (Excel / 文字檔)。
"""
import pandas as pd

NAME_HEADERS = ("name", "姓名", "名字", "名称")


def read_names_from_excel(path):
    """讀取第一個工作表的名字欄位。

    標題列中找 Name/姓名/名字/名称 (不分大小寫)，找不到就用第 2 欄 (只有一欄時用第 1 欄)。
    """
    df = pd.read_excel(path, sheet_name=0, header=None, dtype=str, engine="openpyxl")
    if len(df.index) < 2:
        raise ValueError("Excel file is empty or has incorrect format")

    headers = [str(h).strip().lower() if pd.notna(h) else "" for h in df.iloc[0]]
    name_col = next((i for i, h in enumerate(headers) if h in NAME_HEADERS), None)
    if name_col is None:
        name_col = 1 if len(headers) > 1 else 0

    names = []
    for value in df.iloc[1:, name_col]:
        if pd.isna(value):
            continue
        name = str(value).strip()
        if name:
            names.append(name)
    if not names:
        raise ValueError("Could not read valid names from Excel")
    return names


def write_template(path):
    df = pd.DataFrame({"No.": [1, 2, 3], "Name": ["John", "Jane", "Bob"]})
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Participants")
        sheet = writer.sheets["Participants"]
        sheet.column_dimensions["A"].width = 8
        sheet.column_dimensions["B"].width = 20


def export_winners_excel(path, winners):
    if not winners:
        raise ValueError("No winner records yet")
    df = pd.DataFrame(
        [
            {"No.": i, "Prize": w.prize_label, "Winner": w.winner_name, "Time": w.time_text}
            for i, w in enumerate(winners, start=1)
        ]
    )
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Winners")
        sheet = writer.sheets["Winners"]
        for column, width in zip("ABCD", (6, 12, 15, 20)):
            sheet.column_dimensions[column].width = width


def format_winners_text(winners):
    text = "🏆 Winner List 🏆\n================\n\n"
    for i, w in enumerate(winners, start=1):
        text += f"{i}. {w.prize_label}: {w.winner_name}\n   Time: {w.time_text}\n\n"
    return text


def export_winners_text(path, winners):
    if not winners:
        raise ValueError("No winner records yet")
    with open(path, 'w', encoding='utf-8') as f:
        f.write(format_winners_text(winners))
