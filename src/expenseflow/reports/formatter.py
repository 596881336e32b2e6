"""Bilingual (Indonesian/English) message rendering."""
import calendar
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from ..llm.models import (
    CATEGORIES, ExpenseDraft, ExpenseRecord, MonthlyReport, OwnerCategoryTotal, SourceKind
)


def format_rupiah(amount) -> str:
    """Format an amount the way id-ID locales do: ``Rp 15.000``, ``Rp 2.500,5``."""
    if amount is None:
        return "Rp 0"
    value = Decimal(str(amount)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    if value == 0:
        return "Rp 0"
    integer, fraction = f"{value:,.3f}".split(".")
    fraction = fraction.rstrip("0")
    integer = integer.replace(",", ".")
    return f"Rp {integer},{fraction}" if fraction else f"Rp {integer}"


def format_confirmation(record: ExpenseRecord) -> str:
    """Message confirming a saved expense."""
    lines = [
        "✅ Pengeluaran Berhasil Ditambahkan! / Expense Added Successfully!",
        "",
        f"💰 Jumlah / Amount: {format_rupiah(record.amount)}",
        f"📝 Deskripsi / Description: {record.description}",
        f"🏷️ Kategori / Category: {record.category}",
    ]
    if record.source_kind == SourceKind.IMAGE:
        lines.append(f"🏪 Merchant: {record.merchant or 'Tidak terdeteksi / Not detected'}")
    lines.append(f"📅 Tanggal / Date: {record.date.isoformat()}")
    return "\n".join(lines)


def format_clarification(draft: ExpenseDraft) -> str:
    """Message asking the user for the missing amount."""
    if draft.source_kind == SourceKind.IMAGE:
        return (
            "📸 Image processed but no clear expense amount found.\n\n"
            f"📝 Extracted text: {draft.raw_text or 'No text detected'}\n\n"
            'Please send the amount manually like "Kopi 15rb".'
        )
    return (
        "❌ Tidak dapat mendeteksi jumlah dalam pesan Anda. Mohon sertakan harga.\n\n"
        "Contoh / Example:\n"
        '🇮🇩 "Kopi 15rb", "Makan siang 25000"\n'
        '🇺🇸 "Coffee 15k", "Lunch Rp 25.000"'
    )


def format_unavailable(source_kind: SourceKind) -> str:
    """Message for a failed model call; the user should simply retry."""
    what = "gambar / image" if source_kind == SourceKind.IMAGE else "pesan / message"
    return f"❌ Maaf, {what} tidak dapat diproses saat ini. Silakan coba lagi. / Please try again."


def format_report(report: MonthlyReport, insights_max_chars: Optional[int] = None) -> str:
    """Monthly breakdown by category."""
    period = f"{calendar.month_name[report.month]} {report.year}"
    if report.count == 0:
        return (
            "📊 Belum ada pengeluaran tercatat untuk bulan ini. / "
            f"No expenses recorded for {period} yet."
        )

    lines = [
        f"📊 Laporan Bulanan / Monthly Report - {period}",
        "",
        f"💰 Total Pengeluaran / Total Spent: {format_rupiah(report.total)}",
        f"📝 Total Transaksi / Total Transactions: {report.count}",
        "",
        "Rincian per Kategori / Breakdown by Category:",
    ]
    for summary in report.categories:
        lines.append(
            f"• {summary.category}: {format_rupiah(summary.total)} "
            f"({summary.percentage:.1f}%, {summary.count}x, avg {format_rupiah(summary.average)})"
        )

    if report.insights:
        insights = report.insights
        if insights_max_chars and len(insights) > insights_max_chars:
            insights = insights[:insights_max_chars] + "..."
        lines.extend(["", "🤖 Wawasan AI / AI Insights:", insights])
    return "\n".join(lines)


def format_analytics(rows: List[OwnerCategoryTotal], year: int, month: int) -> str:
    """Spending of all owners by category."""
    period = f"{calendar.month_name[month]} {year}"
    if not rows:
        return f"📈 Belum ada data. / No expenses recorded for {period}."
    lines = [f"📈 Analitik / Analytics - {period}", ""]
    for row in rows:
        lines.append(f"• {row.owner_id} / {row.category}: {format_rupiah(row.total)} ({row.count}x)")
    return "\n".join(lines)


def format_recent(records: List[ExpenseRecord]) -> str:
    """Numbered list of recent expenses."""
    if not records:
        return "📋 Belum ada pengeluaran. / No expenses recorded yet."
    lines = ["📋 Pengeluaran Terbaru / Recent Expenses:", ""]
    for index, record in enumerate(records, start=1):
        lines.append(f"{index}. {format_rupiah(record.amount)} - {record.description}")
        lines.append(f"   📅 {record.date.isoformat()} | 🏷️ {record.category}")
    return "\n".join(lines)


def format_categories() -> str:
    """The fixed category list."""
    lines = ["🏷️ Kategori / Available Categories:", ""]
    lines.extend(f"• {name}" for name in CATEGORIES)
    lines.append("")
    lines.append("Categories are detected automatically from your expense text.")
    return "\n".join(lines)
