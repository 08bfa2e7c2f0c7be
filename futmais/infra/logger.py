"""
Sistema de logging das operações da loja.

Este módulo configura e fornece loggers para registrar as operações
relevantes do sistema: vendas, alterações no carrinho, chamadas ao
armazenamento e eventos gerais. Cada assunto tem seu próprio arquivo
em ``futmais/logs``.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging (FUTMAIS_LOGGING=1 liga)
ENABLE_LOGGING = os.environ.get("FUTMAIS_LOGGING", "0").lower() in {"1", "true", "sim", "yes"}
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é criado na primeira mensagem efetivamente gravada.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = Path(os.environ.get("FUTMAIS_LOGS_DIR") or (BASE_DIR / "logs"))

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "vendas": LOGS_DIR / "vendas.log",
    "carrinho": LOGS_DIR / "carrinho.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

transaction_logger = setup_logger('futmais.transactions', str(LOG_FILES["transactions"]))
venda_logger = setup_logger('futmais.vendas', str(LOG_FILES["vendas"]))
carrinho_logger = setup_logger('futmais.carrinho', str(LOG_FILES["carrinho"]))
database_logger = setup_logger('futmais.database', str(LOG_FILES["database"]))
system_logger = setup_logger('futmais.system', str(LOG_FILES["system"]))


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra o resultado de uma operação de negócio completa.

    Args:
        operation: Nome da operação (checkout, cadastro_produto, ...)
        data: Dados de entrada relevantes
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_venda(action: str, pedido_id: Optional[str], total: float, **kwargs) -> None:
    """Log específico das etapas do checkout."""
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {"action": action, "pedido_id": pedido_id, "total": total, **kwargs}
    venda_logger.info(f"VENDA_{action.upper()}: {log_data}")


def log_carrinho(action: str, produto_id: Optional[str] = None, quantidade: Optional[int] = None,
                 level: str = "info", **kwargs) -> None:
    """Log das mutações do carrinho (inclui falhas de persistência local)."""
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {"action": action, "produto_id": produto_id, "quantidade": quantidade, **kwargs}
    log_method = getattr(carrinho_logger, level.lower(), carrinho_logger.info)
    log_method(f"CARRINHO_{action.upper()}: {log_data}")


def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação (INSERT, UPDATE, DELETE, SELECT)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """Log para operações de arquivo (exportação CSV, carrinho local)."""
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém as últimas linhas de um dos arquivos de log.

    Args:
        log_type: transactions, vendas, carrinho, database ou system
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return None

    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            return ''.join(all_lines[-lines:])
    except OSError as e:
        return f"Erro ao ler log {log_type}: {str(e)}"


def log_startup() -> None:
    """Registra o início de uma sessão da aplicação."""
    log_system_event("startup", {"timestamp": datetime.now().isoformat(), "logs_dir": str(LOGS_DIR)})
    print_system(f"FutMais iniciado; logs em {LOGS_DIR}")
