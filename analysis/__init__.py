"""
Analysis module - Technical indicators, signal scoring and AI commentary.
Consumes market data from data_acquisition and produces indicator sets,
chart data, holding advice and narratives.

分析模块 - 技术指标、信号评分与 AI 点评。
"""
