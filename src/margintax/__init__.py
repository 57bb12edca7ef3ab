"""margintax — progressive income tax liability across jurisdictions."""

__version__ = "0.1.0"

from margintax.config.defaults import default_bracket_source as default_bracket_source
from margintax.config.defaults import default_registry as default_registry
from margintax.config.schema import Bracket as Bracket
from margintax.config.schema import DataConfig as DataConfig
from margintax.config.schema import FilingStatus as FilingStatus
from margintax.config.schema import FlatSpecialIncomePolicy as FlatSpecialIncomePolicy
from margintax.config.schema import JurisdictionPolicy as JurisdictionPolicy
from margintax.config.schema import NoTaxPolicy as NoTaxPolicy
from margintax.config.schema import ProgressivePolicy as ProgressivePolicy
from margintax.core.engine import TaxCalculator as TaxCalculator
from margintax.core.engine import TaxResult as TaxResult
from margintax.core.engine import compute_tax_due as compute_tax_due
from margintax.sources.brackets import InMemoryBracketSource as InMemoryBracketSource
from margintax.sources.brackets import YamlBracketSource as YamlBracketSource
from margintax.sources.registry import StaticJurisdictionRegistry as StaticJurisdictionRegistry
from margintax.taxes.effective import compute_effective_rate as compute_effective_rate
from margintax.taxes.flat import compute_flat_liability as compute_flat_liability
from margintax.taxes.progressive import BracketDiagnostic as BracketDiagnostic
from margintax.taxes.progressive import check_brackets as check_brackets
from margintax.taxes.progressive import compute_liability as compute_liability
from margintax.taxes.progressive import marginal_rate as marginal_rate
from margintax.utils.exceptions import DivisionByZero as DivisionByZero
from margintax.utils.exceptions import InvalidIncome as InvalidIncome
from margintax.utils.exceptions import InvalidJurisdiction as InvalidJurisdiction
from margintax.utils.exceptions import MargintaxError as MargintaxError
from margintax.utils.exceptions import MissingBracketData as MissingBracketData
