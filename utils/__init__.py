"""
Utilities module for the Portfolio Technical Advisor.

=== 开发者必读 / DEVELOPER GUIDE ===

本目录包含项目的核心基础设施和通用工具。

--- 常用工具速查 (Quick Reference) ---

1. 数值处理 (numeric_utils.py) ★ 最常用
   from utils.numeric_utils import clean_numeric, safe_divide, safe_format
   - clean_numeric(value)        清洗数值(NaN/Inf/None → None)
   - safe_divide(a, b)           安全除法(除零保护)
   - safe_format(val, ".2f")     安全格式化(无效值→"N/A")
   - floor_cents / ceil_cents    价位取整(止损向下, 目标向上)

2. 类型转换 (helpers.py)
   from utils.helpers import safe_float, safe_int, format_large_number, normalize_symbol

3. 日志 (logger.py)
   from utils.logger import setup_logger
   - logger = setup_logger('module_name')
   - LoggingContext / set_logging_mode: CLI 切换日志级别

4. HTTP请求 (http_utils.py)
   from utils.http_utils import make_request
   - 单次请求, 404 → NotFoundError, 其他失败 → UpstreamError (不重试)

5. 错误类型 (errors.py)
   MarketDataError / NotFoundError / UpstreamError / InsufficientDataError / LLMError

6. 控制台输出 (console_utils.py, report_utils.py)
   - symbol.OK / symbol.FAIL / symbol.WARN  (跨平台安全符号)
   - print_envelope(data) / print_envelope(error=...)  JSON 输出
   - format_overview_report / format_chart_report / format_advice_report

7. 数据模型 (unified_schema.py)
   Quote, PriceSeries, CompanyProfile, IndicatorSet, TechnicalSignals, AdviceRecord ...

=== 注意事项 ===
- 做数值计算时,务必使用 clean_numeric() 或 safe_divide(),不要裸用 Python 除法
- 做HTTP请求时,务必使用 make_request(),不要直接用 requests.get()
- 跨模块传递的数据一律使用 unified_schema.py 中的模型
- 日志统一用 setup_logger(),不要用 print() 做调试输出
"""

from .logger import setup_logger, default_logger, LoggingContext, set_logging_mode, get_logging_mode
from .helpers import (
    safe_float,
    safe_int,
    format_large_number,
    normalize_symbol
)

__all__ = [
    'setup_logger',
    'default_logger',
    'LoggingContext',
    'set_logging_mode',
    'get_logging_mode',
    'safe_float',
    'safe_int',
    'format_large_number',
    'normalize_symbol'
]
