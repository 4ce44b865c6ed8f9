import logging
import os


class LoggingConfigurator:
    """
    一个用于集中配置项目日志记录器的类。
    """

    def __init__(self, rootLogLevel: str = "INFO"):
        """
        初始化配置器。
        :param rootLogLevel: 从 .env 文件读取的根日志级别字符串。
        """
        self.logLevel = getattr(logging, rootLogLevel.upper(), logging.INFO)
        self.formatter = logging.Formatter("%(asctime)s:%(levelname)s:%(name)s: %(message)s")
        self.streamHandler = logging.StreamHandler()
        self.streamHandler.setFormatter(self.formatter)

    def configure(self):
        """
        应用所有日志配置。
        """
        self._configureRootLogger()
        self._configureSqlAlchemyLogger()
        logging.getLogger("sympep_tracker").info("日志记录器配置完成。")

    def _configureRootLogger(self):
        """配置项目自己的日志记录器。"""
        # 模块内的 logger 以包名 SymPepTracker 开头，命名 logger 以 sympep_tracker 开头
        for name in ("sympep_tracker", "SymPepTracker"):
            logger = logging.getLogger(name)
            logger.setLevel(self.logLevel)
            if not logger.handlers:
                logger.addHandler(self.streamHandler)
            logger.propagate = False

    def _configureSqlAlchemyLogger(self):
        """配置 SQLAlchemy 的日志记录器。"""
        # 从环境变量获取 SQLAlchemy 的日志级别，默认为 WARNING
        log_level_str = os.getenv("SQLALCHEMY_LOG_LEVEL", "WARNING").upper()
        log_level = getattr(logging, log_level_str, logging.WARNING)

        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(log_level)
        if not sql_logger.handlers:
            sql_logger.addHandler(self.streamHandler)
        sql_logger.propagate = False
