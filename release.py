import os
import re

from packaging import version

TARGET_FILE = os.path.join("conversor", "config.py")
VERSION_PATTERN = re.compile(r'CURRENT_VERSION\s*=\s*".*?"')


def bump_version(content: str, new_version: str) -> str:
    """Troca CURRENT_VERSION = "..." (com qualquer espaçamento no igual)."""
    return VERSION_PATTERN.sub(f'CURRENT_VERSION = "{new_version}"', content, count=1)


def is_valid_version(text: str) -> bool:
    try:
        version.Version(text)
    except version.InvalidVersion:
        return False
    return True


def release_new_version():
    print("--- CONVERSOR DE MEDIDAS RELEASE ---")

    new_version = input("Digite o número da nova versão (ex: 1.3.0): ").strip()

    if not is_valid_version(new_version):
        print("Versão inválida.")
        return

    tag_name = f"v{new_version}"

    print(f"\n1. Atualizando {TARGET_FILE} para {new_version}...")

    try:
        with open(TARGET_FILE, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        print(f"ERRO CRÍTICO: O arquivo {TARGET_FILE} não foi encontrado!")
        return

    new_content = bump_version(content, new_version)
    if content == new_content:
        print("⚠️ AVISO: A versão não parece ter sido alterada. Verifique o formato em conversor/config.py.")

    with open(TARGET_FILE, "w", encoding="utf-8") as f:
        f.write(new_content)

    print("\n2. Executando comandos Git...")

    commands = [
        f"git add {TARGET_FILE}",
        f'git commit -m "Release {tag_name}"',
        "git push origin main",
        f"git tag {tag_name}",
        f"git push origin {tag_name}"   # Dispara o GitHub Actions
    ]

    for cmd in commands:
        print(f"> {cmd}")
        result = os.system(cmd)

        if result != 0:
            if "commit" in cmd:
                print("⚠️ Aviso: Nada para commitar. Continuando...")
            else:
                print(f"❌ ERRO ao executar: {cmd}")
                print("Interrompendo script para evitar inconsistências.")
                return

    print(f"\n✅ SUCESSO! A versão {tag_name} foi enviada.")


if __name__ == "__main__":
    release_new_version()
