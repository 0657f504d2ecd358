import uvicorn

from footfall.config import HOST, PORT


def main():
    uvicorn.run("footfall.main:app", host=HOST, port=PORT, reload=False)


if __name__ == "__main__":
    main()
