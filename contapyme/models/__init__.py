from contapyme.models.users import User
from contapyme.models.companies import Company
from contapyme.models.chart_of_accounts import ChartOfAccounts
from contapyme.models.journal_entry import JournalEntry
from contapyme.models.journal_entry_line import JournalEntryLine
from contapyme.models.fixed_assets import FixedAsset, FixedAssetCategory
from contapyme.models.payroll import PayrollConfig, PayrollLiquidation
from contapyme.models.indicators import EconomicIndicator, IndicatorConfig

__all__ = ['ChartOfAccounts', 'Company', 'EconomicIndicator', 'FixedAsset', 'FixedAssetCategory', 'IndicatorConfig', 'JournalEntry', 'JournalEntryLine', 'PayrollConfig', 'PayrollLiquidation', 'User',]
