# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db futmais.db
  python app.py produto add --nome "Camisa Flamengo 2024" --preco 249,90 --custo 120 --estoque 15
  python app.py carrinho add <id-do-produto>
  python app.py checkout --pagamento Pix --cliente <id-do-cliente>
  python app.py dashboard --periodo 7dias
  python app.py exportar clientes
  python app.py tui
"""

from futmais.adapters.cli import main

if __name__ == "__main__":
    main()
