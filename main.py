# main.py
import sys
import os

# Adiciona o diretório atual ao path para garantir que imports 'conversor' funcionem
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from conversor.ui.app import App


def main():
    app = App()
    app.mainloop()


if __name__ == "__main__":
    main()
